from unittest.mock import Mock, patch

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.cache import cache
from django.test import TestCase

from core.testing import make_client, make_partner
from notifications.consumers import NotificationConsumer
from notifications.dispatch import NotificationDispatcher
from notifications.push import DeliveryResult, push_to_users
from notifications.realtime import RealtimeNotifier
from notifications.topics import ORDER_CREATED, user_group
from users.models import DeviceToken


class DispatcherTests(TestCase):

    def test_delivers_only_after_commit(self):
        notifier = Mock()
        dispatcher = NotificationDispatcher(notifier=notifier)

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            dispatcher.publish(ORDER_CREATED, {'id': 'x'}, ['u1'])
            notifier.emit.assert_not_called()

        self.assertEqual(len(callbacks), 1)
        notifier.emit.assert_called_once_with(ORDER_CREATED, {'id': 'x'}, ['u1'])

    def test_nothing_is_sent_when_callbacks_are_discarded(self):
        notifier = Mock()
        dispatcher = NotificationDispatcher(notifier=notifier)

        with self.captureOnCommitCallbacks(execute=False):
            dispatcher.publish(ORDER_CREATED, {}, ['u1'])

        notifier.emit.assert_not_called()

    def test_notifier_failure_is_swallowed(self):
        notifier = Mock()
        notifier.emit.side_effect = RuntimeError('layer down')
        sender = Mock()
        sender.send.return_value = DeliveryResult(success=True)
        user = make_client()
        DeviceToken.objects.create(user=user, token='device-token-1')
        dispatcher = NotificationDispatcher(notifier=notifier, push_sender=sender)

        with self.assertLogs('notifications.dispatch', level='WARNING'):
            dispatcher.deliver(ORDER_CREATED, {}, [user.pk], push=('New job', 'Electricity'))

        sender.send.assert_called_once_with('device-token-1', 'New job', 'Electricity')

    def test_push_failure_is_logged(self):
        dispatcher = NotificationDispatcher(notifier=Mock())

        with patch('notifications.dispatch.push_to_users', side_effect=RuntimeError('boom')):
            with self.assertLogs('notifications.dispatch', level='WARNING') as logs:
                dispatcher.deliver(ORDER_CREATED, {}, ['u1'], push=('t', 'b'))

        self.assertIn('Push delivery', logs.output[0])


class RealtimeNotifierTests(TestCase):

    def test_emits_to_user_group(self):
        layer = get_channel_layer()
        channel = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(user_group('abc'), channel)

        delivered = RealtimeNotifier().emit(ORDER_CREATED, {'price': 1}, ['abc'])

        self.assertEqual(delivered, 1)
        message = async_to_sync(layer.receive)(channel)
        self.assertEqual(message['type'], 'notify')
        self.assertEqual(message['topic'], ORDER_CREATED)
        self.assertEqual(message['payload'], {'price': 1})

    def test_no_recipients(self):
        self.assertEqual(RealtimeNotifier().emit(ORDER_CREATED, {}, []), 0)

    def test_missing_layer_drops_event(self):
        with patch('notifications.realtime.get_channel_layer', return_value=None):
            self.assertEqual(RealtimeNotifier().emit(ORDER_CREATED, {}, ['abc']), 0)


class PushTests(TestCase):

    def setUp(self):
        self.user = make_client()
        DeviceToken.objects.create(user=self.user, token='token-a', platform='android')
        DeviceToken.objects.create(user=self.user, token='token-b', platform='ios')

    def test_counts_delivered_devices(self):
        sender = Mock()
        sender.send.side_effect = [
            DeliveryResult(success=True),
            DeliveryResult(success=False, error='unregistered'),
        ]

        self.assertEqual(push_to_users([self.user.pk], 'Hi', 'There', sender=sender), 1)
        self.assertEqual(sender.send.call_count, 2)

    def test_sender_exception_skips_device(self):
        sender = Mock()
        sender.send.side_effect = [RuntimeError('timeout'), DeliveryResult(success=True)]

        self.assertEqual(push_to_users([self.user.pk], 'Hi', 'There', sender=sender), 1)

    def test_users_without_devices(self):
        other = make_client('nodevice@test.com')
        sender = Mock()

        self.assertEqual(push_to_users([other.pk], 'Hi', 'There', sender=sender), 0)
        sender.send.assert_not_called()

    def test_default_backend_logs(self):
        with self.assertLogs('notifications.push', level='INFO'):
            self.assertEqual(push_to_users([self.user.pk], 'Hi', 'There'), 2)


@patch('notifications.consumers.async_to_sync', side_effect=lambda fn: fn)
class PartnerPresenceTests(TestCase):

    def setUp(self):
        cache.clear()
        self.partner = make_partner(online=False)

    def _socket(self):
        consumer = NotificationConsumer()
        consumer.scope = {'user': self.partner}
        consumer.channel_layer = Mock()
        consumer.channel_name = f'test.{id(consumer)}'
        consumer.accept = Mock()
        consumer.connect()
        return consumer

    def _is_online(self):
        self.partner.partner_profile.refresh_from_db()
        return self.partner.partner_profile.is_online

    def test_partner_stays_online_until_last_socket_closes(self, _sync):
        phone = self._socket()
        laptop = self._socket()
        self.assertTrue(self._is_online())

        phone.disconnect(1000)
        self.assertTrue(self._is_online())

        laptop.disconnect(1000)
        self.assertFalse(self._is_online())

    def test_reconnect_after_going_offline(self, _sync):
        self._socket().disconnect(1000)
        self.assertFalse(self._is_online())

        self._socket()
        self.assertTrue(self._is_online())

    def test_clients_do_not_touch_presence(self, _sync):
        consumer = NotificationConsumer()
        consumer.scope = {'user': make_client()}
        consumer.channel_layer = Mock()
        consumer.channel_name = 'test.client'
        consumer.accept = Mock()

        consumer.connect()
        consumer.disconnect(1000)

        consumer.accept.assert_called_once()
        self.assertFalse(self._is_online())
