# apps/board/consumers.py

import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from .events import project_group_name

logger = logging.getLogger(__name__)


class ProjectConsumer(AsyncWebsocketConsumer):
    """
    WebSocket consumer for live dashboard updates

    Features:
    - Project created/updated/deleted notifications for the owner
    - Heartbeat (ping/pong)
    """

    async def connect(self):
        """
        Joins the user's project group
        Refuses the connection without a valid token
        """
        self.user = self.scope.get('user')

        if self.user is None or not self.user.is_authenticated:
            logger.warning("WebSocket connection rejected - unauthenticated")
            await self.close()
            return

        self.group_name = project_group_name(self.user.pk)

        await self.channel_layer.group_add(
            self.group_name,
            self.channel_name
        )

        await self.accept()

        await self.send(text_data=json.dumps({
            'type': 'connected',
            'message': {
                'userId': str(self.user.pk),
                'heartbeatInterval': settings.DASHBOARD_WS_HEARTBEAT_INTERVAL,
                'timestamp': self.get_timestamp()
            }
        }))

        logger.info("WebSocket connected - %s", self.user.email)

    async def disconnect(self, close_code):
        if hasattr(self, 'group_name'):
            await self.channel_layer.group_discard(
                self.group_name,
                self.channel_name
            )
            logger.info("WebSocket disconnected - %s (code %s)", self.user.email, close_code)

    async def receive(self, text_data=None, bytes_data=None):
        """
        Messages from the client

        Only the heartbeat is understood; anything else gets an error frame.
        """
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.warning("Invalid JSON received over WebSocket from %s", self.user.email)
            await self.send_error('Invalid JSON')
            return

        message_type = data.get('type') if isinstance(data, dict) else None

        if message_type == 'ping':
            await self.send(text_data=json.dumps({
                'type': 'pong',
                'timestamp': self.get_timestamp()
            }))
            return

        await self.send_error(f'Unknown message type: {message_type}')

    # === Group event handlers ===

    async def project_created(self, event):
        await self.forward('project_created', event)

    async def project_updated(self, event):
        await self.forward('project_updated', event)

    async def project_deleted(self, event):
        await self.forward('project_deleted', event)

    # === Helpers ===

    async def forward(self, event_type, event):
        await self.send(text_data=json.dumps({
            'type': event_type,
            'message': event['message']
        }))

    async def send_error(self, message):
        await self.send(text_data=json.dumps({
            'type': 'error',
            'message': message
        }))

    def get_timestamp(self):
        return timezone.now().isoformat()
