# apps/core/signals.py

import logging

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .models import Project, User, normalize_email

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=User)
def normalize_user_fields(sender, instance, **kwargs):
    """
    Keep emails lower-cased and names trimmed whatever the entry point
    (API, admin, createsuperuser, seed)
    """
    instance.email = normalize_email(instance.email)
    instance.name = (instance.name or '').strip()


@receiver(pre_save, sender=Project)
def trim_project_fields(sender, instance, **kwargs):
    instance.name = (instance.name or '').strip()
    instance.description = (instance.description or '').strip()


@receiver(post_save, sender=Project)
def log_project_saved(sender, instance, created, **kwargs):
    if created:
        logger.debug("Project %s saved for owner %s", instance.pk, instance.created_by_id)


@receiver(post_delete, sender=Project)
def log_project_deleted(sender, instance, **kwargs):
    logger.debug("Project %s removed (owner %s)", instance.pk, instance.created_by_id)
