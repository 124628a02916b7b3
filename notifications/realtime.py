import json
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.serializers.json import DjangoJSONEncoder

from .topics import user_group

logger = logging.getLogger(__name__)


class RealtimeNotifier:
    """
    Fire-and-forget fan-out of named events through the Channels layer.

    Each recipient receives the event on its ``user_<id>`` group, which
    ``NotificationConsumer`` forwards to every open socket of that user.
    Failures are logged and never raised.
    """

    def emit(self, topic, payload, recipients=()):
        recipients = [str(r) for r in recipients if r]
        if not recipients:
            logger.debug(f"No recipients for {topic}, skipping")
            return 0

        layer = get_channel_layer()
        if layer is None:
            logger.warning(f"No channel layer configured, dropping {topic}")
            return 0

        # Channel layers only carry plain JSON types
        message = {
            'type': 'notify',
            'topic': topic,
            'payload': json.loads(json.dumps(payload, cls=DjangoJSONEncoder)),
        }
        delivered = 0
        for user_id in recipients:
            try:
                async_to_sync(layer.group_send)(user_group(user_id), message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Could not emit {topic} to user {user_id}: {e}")
        logger.debug(f"Emitted {topic} to {delivered}/{len(recipients)} recipients")
        return delivered
