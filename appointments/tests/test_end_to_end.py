"""
Full order-to-settlement scenario across every marketplace app.
"""
from decimal import Decimal
from unittest.mock import Mock

from django.test import TestCase

from appointments.models import Appointment
from appointments.services import AppointmentService
from core.testing import make_client, make_partner, order_data
from notifications import topics
from orders.models import Order
from orders.services import OrderService
from payments.models import Transaction
from promotions.models import Promotion


class OrderToSettlementTests(TestCase):

    def setUp(self):
        self.dispatcher = Mock()
        self.c1 = make_client('c1@test.com')
        self.p1 = make_partner('p1@test.com')
        self.p2 = make_partner('p2@test.com')
        self.appointments = AppointmentService(dispatcher=self.dispatcher)
        self.orders = OrderService(dispatcher=self.dispatcher, appointments=self.appointments)
        Promotion.objects.create(code='SAVE10', kind=Promotion.Kind.PERCENTAGE, value=Decimal('10'))

    def _published(self, topic):
        return [call[0] for call in self.dispatcher.publish.call_args_list if call[0][0] == topic]

    def test_electricity_job_paid_by_qr(self):
        order = self.orders.create_order(self.c1, order_data(category='electricity'))
        (_topic, _payload, notified), = self._published(topics.ORDER_CREATED)
        self.assertCountEqual(notified, [self.p1.pk, self.p2.pk])

        self.orders.add_applicant(order.pk, self.p1, {'offered_price': Decimal('200000')})
        order, appointment = self.orders.select_applicant(order.pk, self.p1.pk)
        self.assertEqual(appointment.status, Appointment.Status.NAVIGATION)

        for step in (
            Appointment.Status.INSPECTION,
            Appointment.Status.WORKING,
            Appointment.Status.HANDOVER,
        ):
            self.appointments.update(appointment.pk, {'status': step}, actor='partner')
        appointment = self.appointments.update(
            appointment.pk,
            {
                'status': Appointment.Status.PAYMENT,
                'agreed_price': Decimal('500000'),
                'promotion_code': 'SAVE10',
            },
            actor='client',
        )
        self.assertEqual(appointment.discount, Decimal('50000'))
        self.assertEqual(appointment.final_amount, Decimal('450000'))

        self.appointments.update_to_complete(
            appointment.pk,
            {'payment_method': 'qr', 'partner_id': self.p1.pk, 'amount': appointment.final_amount},
        )

        self.p1.partner_profile.refresh_from_db()
        self.assertEqual(self.p1.partner_profile.balance, Decimal('405000'))
        settlement = Transaction.objects.get(user=self.p1)
        self.assertEqual(settlement.kind, Transaction.Kind.APPOINTMENT)
        self.assertEqual(settlement.status, Transaction.Status.SUCCESS)
        order.refresh_from_db()
        self.assertEqual(order.status, Order.Status.COMPLETED)
