from decimal import Decimal
from unittest.mock import Mock

from django.test import TestCase

from appointments.models import Appointment
from chat.models import ChatRoom
from core.exceptions import BusinessRule, Conflict, NotFound
from core.testing import make_client, make_partner, order_data
from notifications import topics
from orders.models import Order, Applicant
from orders.services import OrderService


class OrderServiceTestCase(TestCase):

    def setUp(self):
        self.dispatcher = Mock()
        self.service = OrderService(dispatcher=self.dispatcher)
        self.client_user = make_client()
        self.p1 = make_partner('p1@test.com')
        self.p2 = make_partner('p2@test.com')

    def _bid(self, order, partner, price='200000'):
        return self.service.add_applicant(order.pk, partner, {'offered_price': Decimal(price), 'note': 'Can come today'})


class CreateOrderTests(OrderServiceTestCase):

    def test_create_order_notifies_eligible_partners(self):
        make_partner('offline@test.com', online=False)
        make_partner('locked@test.com', locked=True)
        make_partner('plumber@test.com', categories=('water',))
        make_partner('unapproved@test.com', approved=False)

        order = self.service.create_order(self.client_user, order_data())

        self.assertEqual(order.status, Order.Status.PENDING)
        self.dispatcher.publish.assert_called_once()
        topic, payload, recipients = self.dispatcher.publish.call_args[0]
        self.assertEqual(topic, topics.ORDER_CREATED)
        self.assertEqual(payload['order_id'], order.pk)
        self.assertCountEqual(recipients, [self.p1.pk, self.p2.pk])

    def test_create_order_with_no_eligible_partner_still_succeeds(self):
        order = self.service.create_order(self.client_user, order_data(category='locksmith'))

        self.assertTrue(Order.objects.filter(pk=order.pk).exists())
        self.dispatcher.publish.assert_not_called()

    def test_second_pending_order_is_rejected(self):
        self.service.create_order(self.client_user, order_data())

        with self.assertRaises(Conflict):
            self.service.create_order(self.client_user, order_data(service='Another job'))
        self.assertEqual(Order.objects.filter(client=self.client_user).count(), 1)

    def test_new_order_allowed_once_previous_is_cancelled(self):
        first = self.service.create_order(self.client_user, order_data())
        self.service.cancel_order(first.pk)

        second = self.service.create_order(self.client_user, order_data())
        self.assertNotEqual(first.pk, second.pk)

    def test_directory_failure_does_not_block_creation(self):
        directory = Mock()
        directory.eligible_partner_ids.side_effect = RuntimeError('directory down')
        service = OrderService(dispatcher=self.dispatcher, directory=directory)

        order = service.create_order(self.client_user, order_data())

        self.assertEqual(order.status, Order.Status.PENDING)
        self.dispatcher.publish.assert_not_called()


class BiddingTests(OrderServiceTestCase):

    def setUp(self):
        super().setUp()
        self.order = self.service.create_order(self.client_user, order_data())
        self.dispatcher.reset_mock()

    def test_add_applicant_creates_room_and_notifies_client(self):
        applicant = self._bid(self.order, self.p1)

        self.assertEqual(applicant.offered_price, Decimal('200000'))
        self.assertIsNotNone(applicant.room)
        self.assertEqual(applicant.room.partner_id, self.p1.pk)
        topic, payload, recipients = self.dispatcher.publish.call_args[0]
        self.assertEqual(topic, topics.ORDER_BID_ADDED)
        self.assertEqual(recipients, [self.client_user.pk])

    def test_duplicate_bid_is_rejected(self):
        self._bid(self.order, self.p1)

        with self.assertRaises(Conflict):
            self._bid(self.order, self.p1, price='150000')
        self.assertEqual(self.order.applicants.count(), 1)

    def test_bid_on_missing_order(self):
        with self.assertRaises(NotFound):
            self.service.add_applicant('f' * 24, self.p1, {'offered_price': Decimal('1')})

    def test_bid_on_assign_mode_order_is_rejected(self):
        self.order.mode = Order.Mode.ASSIGN
        self.order.save()

        with self.assertRaises(BusinessRule):
            self._bid(self.order, self.p1)

    def test_bid_on_cancelled_order_is_rejected(self):
        self.service.cancel_order(self.order.pk)

        with self.assertRaises(BusinessRule):
            self._bid(self.order, self.p1)

    def test_chat_room_failure_still_stores_bid(self):
        chat_rooms = Mock()
        chat_rooms.create.side_effect = RuntimeError('chat unavailable')
        service = OrderService(dispatcher=self.dispatcher, chat_rooms=chat_rooms)

        applicant = service.add_applicant(self.order.pk, self.p1, {'offered_price': Decimal('200000')})

        self.assertIsNone(applicant.room)
        self.assertTrue(Applicant.objects.filter(pk=applicant.pk).exists())

    def test_cancel_applicant_removes_bid_and_room(self):
        self._bid(self.order, self.p1)

        self.service.cancel_applicant(self.order.pk, self.p1.pk)

        self.assertFalse(self.order.applicants.exists())
        self.assertFalse(ChatRoom.objects.filter(order_id=self.order.pk).exists())

    def test_cancel_unknown_applicant(self):
        with self.assertRaises(NotFound):
            self.service.cancel_applicant(self.order.pk, self.p1.pk)


class SelectApplicantTests(OrderServiceTestCase):

    def setUp(self):
        super().setUp()
        self.order = self.service.create_order(self.client_user, order_data())
        self.first = self._bid(self.order, self.p1, '200000')
        self._bid(self.order, self.p2, '180000')
        self.dispatcher.reset_mock()

    def test_select_collapses_applicants_and_creates_appointment(self):
        order, appointment = self.service.select_applicant(self.order.pk, self.p1.pk)

        self.assertEqual(order.status, Order.Status.PROCESSING)
        self.assertEqual(list(order.applicants.values_list('partner_id', flat=True)), [self.p1.pk])
        self.assertEqual(appointment.status, Appointment.Status.NAVIGATION)
        self.assertEqual(appointment.partner, self.p1)
        self.assertEqual(appointment.room_id, self.first.room_id)
        self.assertEqual(appointment.agreed_price, Decimal('200000'))

        published = [call[0][0] for call in self.dispatcher.publish.call_args_list]
        self.assertIn(topics.ORDER_APPLICANT_SELECTED, published)

    def test_second_selection_fails(self):
        self.service.select_applicant(self.order.pk, self.p1.pk)

        with self.assertRaises(BusinessRule):
            self.service.select_applicant(self.order.pk, self.p2.pk)
        self.assertEqual(Appointment.objects.filter(order=self.order).count(), 1)

    def test_select_partner_who_never_bid(self):
        outsider = make_partner('outsider@test.com')

        with self.assertRaises(NotFound):
            self.service.select_applicant(self.order.pk, outsider.pk)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.PENDING)

    def test_cancel_completed_order_is_rejected(self):
        self.service.select_applicant(self.order.pk, self.p1.pk)
        self.service.mark_completed(self.order.pk)

        with self.assertRaises(BusinessRule):
            self.service.cancel_order(self.order.pk)


class OrderQueryTests(OrderServiceTestCase):

    def test_list_by_categories(self):
        other_client = make_client('other@test.com')
        self.service.create_order(self.client_user, order_data())
        self.service.create_order(other_client, order_data(category='water'))

        self.assertEqual(self.service.list_by_categories(['water']).count(), 1)
        self.assertEqual(self.service.list_by_categories(['water', 'electricity']).count(), 2)
        self.assertEqual(self.service.list_by_categories(['']).count(), 0)

    def test_update_order_only_touches_descriptive_fields(self):
        order = self.service.create_order(self.client_user, order_data())

        self.service.update_order(order.pk, {'description': 'Two sockets now', 'status': 'completed'})

        order.refresh_from_db()
        self.assertEqual(order.description, 'Two sockets now')
        self.assertEqual(order.status, Order.Status.PENDING)
