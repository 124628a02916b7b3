"""
Single boundary between business logic and outbound notifications.

``publish`` registers delivery with ``transaction.on_commit`` so observers
never hear about state that failed to persist. Delivery problems are logged
and swallowed; the persisted state is the source of truth.
"""
import logging
from functools import partial

from django.db import transaction

from .push import push_to_users
from .realtime import RealtimeNotifier

logger = logging.getLogger(__name__)


class NotificationDispatcher:

    def __init__(self, notifier=None, push_sender=None):
        self.notifier = notifier or RealtimeNotifier()
        self.push_sender = push_sender

    def publish(self, topic, payload, recipients, push=None):
        """
        Args:
            topic (str): Event name from ``notifications.topics``
            payload (dict): JSON-serializable event body
            recipients (iterable): User ids to notify
            push (tuple | None): Optional ``(title, body)`` for device push
        """
        transaction.on_commit(
            partial(self.deliver, topic, payload, list(recipients), push)
        )

    def deliver(self, topic, payload, recipients, push=None):
        try:
            self.notifier.emit(topic, payload, recipients)
        except Exception as e:
            logger.warning(f"Realtime delivery of {topic} failed: {e}")

        if push:
            title, body = push
            try:
                push_to_users(recipients, title, body, sender=self.push_sender)
            except Exception as e:
                logger.warning(f"Push delivery of {topic} failed: {e}")
