import json
import logging
from asgiref.sync import async_to_sync
from channels.generic.websocket import WebsocketConsumer

from users.services import PartnerDirectory
from .presence import socket_opened, socket_closed
from .topics import user_group

logger = logging.getLogger(__name__)


class NotificationConsumer(WebsocketConsumer):
    """
    Delivers marketplace events to a connected client or partner.

    URL: ws://localhost:8000/ws/notifications/?token=<jwt_access_token>

    Server pushes: {"type": "<topic>", "payload": {...}}

    A partner is marked online on its first open socket and offline when
    its last socket closes.

    Close codes:
    - 4001: Unauthenticated user
    """

    def connect(self):
        self.user = self.scope.get('user')

        if self.user is None or not self.user.is_authenticated:
            logger.warning("Anonymous connection attempt to notifications")
            self.close(code=4001)
            return

        self.group_name = user_group(self.user.id)
        async_to_sync(self.channel_layer.group_add)(self.group_name, self.channel_name)
        self.accept()

        if self.user.role == 'PARTNER':
            if socket_opened(self.user.id) == 1:
                PartnerDirectory().set_online(self.user.id, True)

        logger.info(f"User {self.user.email} ({self.user.role}) connected to notifications")

    def disconnect(self, close_code):
        if not hasattr(self, 'group_name'):
            return

        async_to_sync(self.channel_layer.group_discard)(self.group_name, self.channel_name)

        if self.user.role == 'PARTNER':
            remaining = socket_closed(self.user.id)
            if remaining == 0:
                PartnerDirectory().set_online(self.user.id, False)
            else:
                logger.debug(f"Partner {self.user.email} still has {remaining} open sockets")

        logger.info(f"User {self.user.email} disconnected (code: {close_code})")

    def receive(self, text_data=None, bytes_data=None):
        # Only heartbeats are accepted from the socket
        try:
            data = json.loads(text_data or '{}')
        except json.JSONDecodeError:
            data = {}
        if data.get('type') == 'ping':
            self.send(text_data=json.dumps({'type': 'pong'}))

    def notify(self, event):
        self.send(text_data=json.dumps({
            'type': event['topic'],
            'payload': event['payload'],
        }))
