# apps/core/models.py

import re
import uuid

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

# Same loose rule for account emails and assignee emails
EMAIL_PATTERN = re.compile(r'^\S+@\S+\.\S+$')


def validate_email_format(value):
    """Reject anything that does not look like local@domain.tld"""
    if not EMAIL_PATTERN.match(value or ''):
        raise ValidationError('Please provide a valid email', code='invalid_email')


def normalize_email(value):
    return (value or '').strip().lower()


class UserManager(BaseUserManager):
    """Manager for email-identified users"""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        email = normalize_email(email)
        if not email:
            raise ValueError('Email is required')
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self._create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=normalize_email(email))


class User(AbstractUser):
    """
    Dashboard account

    Identified by email; the password is stored hashed by Django's hashers
    and never leaves the model through the API.
    """

    username = None
    first_name = None
    last_name = None

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, validators=[validate_email_format])
    name = models.CharField(max_length=150)

    # === METADATA ===
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    class Meta:
        db_table = 'users'
        ordering = ['name']

    def clean(self):
        super().clean()
        self.email = normalize_email(self.email)
        self.name = (self.name or '').strip()

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name

    def get_accessible_projects(self):
        """Projects this user may read or change: only the ones they created"""
        return Project.objects.filter(created_by=self)

    def to_public_dict(self, id_key='id'):
        return {
            id_key: str(self.pk),
            'email': self.email,
            'name': self.name,
        }

    def __str__(self):
        return f"{self.name} <{self.email}>"


class Project(models.Model):
    """Tracked work item shown in the table and kanban views"""

    STATUS_PLANNING = 'Planning'
    STATUS_IN_PROGRESS = 'In Progress'
    STATUS_COMPLETED = 'Completed'

    STATUS_CHOICES = [
        (STATUS_PLANNING, 'Planning'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    PRIORITY_HIGH = 'High'
    PRIORITY_MEDIUM = 'Medium'
    PRIORITY_LOW = 'Low'

    PRIORITY_CHOICES = [
        (PRIORITY_HIGH, 'High'),
        (PRIORITY_MEDIUM, 'Medium'),
        (PRIORITY_LOW, 'Low'),
    ]

    # Lower sorts first
    PRIORITY_RANK = {PRIORITY_HIGH: 0, PRIORITY_MEDIUM: 1, PRIORITY_LOW: 2}

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PLANNING)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default=PRIORITY_MEDIUM)
    due_date = models.DateField()
    created_by = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='projects'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projects'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_by', 'status'], name='projects_owner_status_idx'),
            models.Index(fields=['due_date'], name='projects_due_date_idx'),
        ]

    @property
    def assignees(self):
        """Assignee emails in the order they were given"""
        return [assignee.email for assignee in self.assignee_set.all()]

    def set_assignees(self, emails):
        """Replace the assignee list (project must be saved)"""
        getattr(self, '_prefetched_objects_cache', {}).pop('assignee_set', None)
        self.assignee_set.all().delete()
        ProjectAssignee.objects.bulk_create([
            ProjectAssignee(project=self, email=email, position=position)
            for position, email in enumerate(dict.fromkeys(emails))
        ])

    def is_overdue(self, today=None):
        today = today or timezone.localdate()
        return self.status != self.STATUS_COMPLETED and self.due_date < today

    def to_dict(self):
        return {
            '_id': str(self.pk),
            'name': self.name,
            'description': self.description,
            'status': self.status,
            'priority': self.priority,
            'assignees': self.assignees,
            'dueDate': self.due_date.isoformat(),
            'createdBy': self.created_by.to_public_dict(id_key='_id'),
            'createdAt': self.created_at.isoformat(),
            'updatedAt': self.updated_at.isoformat(),
        }

    def __str__(self):
        return f"{self.name} ({self.status})"


class ProjectAssignee(models.Model):
    """
    Email attached to a project

    Plain string on purpose: assignees do not need an account.
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='assignee_set'
    )
    email = models.CharField(max_length=254, validators=[validate_email_format], db_index=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'project_assignees'
        ordering = ['position', 'id']
        unique_together = ['project', 'email']

    def __str__(self):
        return f"{self.email} -> {self.project.name}"
