# apps/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Core app configuration"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core - Accounts & Projects'

    def ready(self):
        """Connect signal handlers"""
        from . import signals  # noqa: F401
