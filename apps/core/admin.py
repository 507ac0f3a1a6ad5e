# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserChangeForm, UserCreationForm

from .models import Project, ProjectAssignee, User


class DashboardUserCreationForm(UserCreationForm):
    class Meta:
        model = User
        fields = ('email', 'name')


class DashboardUserChangeForm(UserChangeForm):
    class Meta:
        model = User
        fields = ('email', 'name')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for email-identified users"""

    form = DashboardUserChangeForm
    add_form = DashboardUserCreationForm

    list_display = ['email', 'name', 'projects_count', 'is_staff', 'is_active', 'created_at']
    list_filter = ['is_staff', 'is_superuser', 'is_active']
    search_fields = ['email', 'name']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at', 'last_login', 'date_joined']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('name',)}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Dates', {'fields': ('last_login', 'date_joined', 'created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2'),
        }),
    )

    def projects_count(self, obj):
        """Projects created by the user"""
        return obj.projects.count()

    projects_count.short_description = 'Projects'


class ProjectAssigneeInline(admin.TabularInline):
    model = ProjectAssignee
    extra = 1
    fields = ['email', 'position']


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Project admin"""

    list_display = ['name', 'status', 'priority', 'due_date', 'created_by', 'assignees_display', 'created_at']
    list_filter = ['status', 'priority', 'due_date']
    search_fields = ['name', 'description', 'created_by__email', 'assignee_set__email']
    date_hierarchy = 'due_date'
    readonly_fields = ['created_at', 'updated_at']
    autocomplete_fields = ['created_by']
    inlines = [ProjectAssigneeInline]

    fieldsets = (
        ('Project', {
            'fields': ('name', 'description', 'created_by')
        }),
        ('Tracking', {
            'fields': ('status', 'priority', 'due_date')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('created_by').prefetch_related('assignee_set')

    def assignees_display(self, obj):
        return ', '.join(obj.assignees) or '-'

    assignees_display.short_description = 'Assignees'
