# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTHENTICATION ===
    path('auth/register', views.register_view, name='register'),
    path('auth/login', views.login_view, name='login'),
    path('auth/me', views.me_view, name='me'),

    # === PROJECTS ===
    path('projects', views.projects_view, name='projects'),
    path('projects/<str:project_id>', views.project_detail_view, name='project_detail'),

    # === USERS ===
    path('users', views.users_view, name='users'),

    # === MONITORING ===
    path('health', views.health_check, name='health'),
]
