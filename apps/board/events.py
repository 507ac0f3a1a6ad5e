# apps/board/events.py

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)

PROJECT_EVENTS = ('project_created', 'project_updated', 'project_deleted')


def project_group_name(user_id):
    """Channel group shared by every open dashboard of a user"""
    return f'projects_{user_id}'


def build_event_message(event, project=None, project_id=None):
    message = {
        'event': event,
        'projectId': str(project.pk) if project is not None else str(project_id),
        'timestamp': timezone.now().isoformat(),
    }
    if project is not None:
        message['project'] = project.to_dict()
    return message


def send_project_event(event, message, owner_id):
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    try:
        async_to_sync(channel_layer.group_send)(
            project_group_name(owner_id),
            {
                'type': event,
                'message': message,
            }
        )
    except Exception:
        # Best effort: the change is already committed
        logger.exception("Failed to broadcast %s to owner %s", event, owner_id)


def broadcast_project_event(event, project=None, *, project_id=None, owner_id=None):
    """
    Push a project event to the owner's WebSocket group

    The message is built right away (the project may be gone by then) and
    sent once the surrounding transaction commits, so listeners never hear
    about rolled back changes.
    """
    if event not in PROJECT_EVENTS:
        raise ValueError(f'Unknown project event: {event}')
    if project is None and (project_id is None or owner_id is None):
        raise ValueError('Either project or project_id and owner_id are required')

    if project is not None:
        owner_id = project.created_by_id

    message = build_event_message(event, project=project, project_id=project_id)
    transaction.on_commit(lambda: send_project_event(event, message, owner_id))
