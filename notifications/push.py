"""
Push notification senders.

The delivery transport is pluggable through ``settings.PUSH_SENDER_BACKEND``;
the default backend only logs, the same way Django's console email backend
does for mail.
"""
import logging
from dataclasses import dataclass

from django.conf import settings
from django.utils.module_loading import import_string

from users.models import DeviceToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    error: str = ''


class BasePushSender:
    def send(self, device_token, title, body):
        raise NotImplementedError


class LoggingPushSender(BasePushSender):
    def send(self, device_token, title, body):
        logger.info(f"[push] {device_token[:12]}… {title}: {body}")
        return DeliveryResult(success=True)


def get_push_sender():
    return import_string(settings.PUSH_SENDER_BACKEND)()


def push_to_users(user_ids, title, body, sender=None):
    """Send to every registered device of the given users. Returns the delivered count."""
    tokens = list(
        DeviceToken.objects.filter(user_id__in=list(user_ids)).values_list('token', flat=True)
    )
    if not tokens:
        logger.debug(f"No device tokens for users {list(user_ids)}")
        return 0

    sender = sender or get_push_sender()
    delivered = 0
    for token in tokens:
        try:
            result = sender.send(token, str(title), str(body))
        except Exception as e:
            logger.warning(f"Push to {token[:12]}… failed: {e}")
            continue
        if result.success:
            delivered += 1
        else:
            logger.warning(f"Push to {token[:12]}… rejected: {result.error}")
    return delivered
