from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest.mock import Mock

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from appointments.models import Appointment
from appointments.services import AppointmentService
from core.exceptions import BusinessRule, NotFound
from core.testing import make_client, make_partner, order_data
from notifications import topics
from orders.models import Order
from payments.models import Transaction, PaidTransaction
from payments.services.ledger import LedgerService


class LedgerTestCase(TestCase):

    def setUp(self):
        self.dispatcher = Mock()
        self.ledger = LedgerService(dispatcher=self.dispatcher)
        self.partner = make_partner(balance=Decimal('10000'))
        self.client_user = make_client()

    def _balance(self):
        self.partner.partner_profile.refresh_from_db()
        return self.partner.partner_profile.balance

    def _appointment(self, **extra):
        order = Order.objects.create(client=self.client_user, status=Order.Status.PROCESSING, **order_data())
        return Appointment.objects.create(
            order=order, client=self.client_user, partner=self.partner,
            status=Appointment.Status.PAYMENT, agreed_price=Decimal('450000'), **extra
        )


class TopUpWebhookTests(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.intent, self.qr_url = self.ledger.create_top_up_intent(self.partner.pk, Decimal('200000'))

    def test_intent_is_pending_with_descriptor_and_link(self):
        self.assertEqual(self.intent.status, Transaction.Status.PENDING)
        self.assertTrue(self.intent.descriptor.startswith(f'TOPUP{self.partner.pk}_'))
        self.assertIn('amount=200000', self.qr_url)
        self.assertIn(f'des={self.intent.descriptor}', self.qr_url)

    def test_top_up_credits_balance(self):
        result = self.ledger.handle_webhook({'content': self.intent.descriptor, 'transferAmount': 200000})

        self.assertTrue(result.ok)
        self.assertEqual(self._balance(), Decimal('210000'))
        self.intent.refresh_from_db()
        self.assertEqual(self.intent.status, Transaction.Status.SUCCESS)
        self.assertEqual(self.intent.balance_after, Decimal('210000'))
        self.assertEqual(self.dispatcher.publish.call_args[0][0], topics.TOPUP_SUCCEEDED)

    def test_replayed_webhook_credits_once(self):
        payload = {'description': f'MBVCB {self.intent.descriptor}', 'amount': '200000'}

        first = self.ledger.handle_webhook(payload)
        second = self.ledger.handle_webhook(payload)

        self.assertTrue(first.ok)
        self.assertEqual(second.as_dict(), {'ok': False, 'reason': 'not_found'})
        self.assertEqual(self._balance(), Decimal('210000'))
        self.assertEqual(Transaction.objects.filter(status=Transaction.Status.SUCCESS).count(), 1)

    def test_amount_mismatch_leaves_balance_untouched(self):
        before = self._balance()

        result = self.ledger.handle_webhook({'description': self.intent.descriptor, 'amount': 199999})

        self.assertEqual(result.reason, 'amount_mismatch')
        self.assertEqual(self._balance(), before)
        self.intent.refresh_from_db()
        self.assertEqual(self.intent.status, Transaction.Status.PENDING)

    def test_truncated_descriptor_matches_latest_intent(self):
        result = self.ledger.handle_webhook({'description': f'TOPUP{self.partner.pk}', 'amount': 200000})

        self.assertTrue(result.ok)

    def test_malformed_descriptor(self):
        result = self.ledger.handle_webhook({'description': 'TOPUP123', 'amount': 200000})
        self.assertEqual(result.reason, 'invalid_format')

    def test_unknown_transaction_type(self):
        result = self.ledger.handle_webhook({'description': 'Salary October', 'amount': 200000})
        self.assertEqual(result.reason, 'unknown_transaction_type')

    def test_missing_partner_profile_rolls_back_claim(self):
        intent, _url = self.ledger.create_top_up_intent(self.client_user.pk, Decimal('5000'))

        result = self.ledger.handle_webhook({'description': intent.descriptor, 'amount': 5000})

        self.assertEqual(result.reason, 'update_balance_failed')
        intent.refresh_from_db()
        self.assertEqual(intent.status, Transaction.Status.PENDING)

    def test_top_up_for_missing_user(self):
        with self.assertRaises(NotFound):
            self.ledger.create_top_up_intent('0' * 24, Decimal('1000'))


class JobPaymentWebhookTests(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.appointment = self._appointment()
        self.intent, _url = self.ledger.create_job_payment_intent(
            self.client_user.pk, self.partner.pk, self.appointment.pk, Decimal('450000')
        )

    def test_job_payment_completes_appointment(self):
        result = self.ledger.handle_webhook({'code': self.intent.descriptor, 'amount': 450000})

        self.assertTrue(result.ok)
        self.appointment.refresh_from_db()
        self.assertEqual(self.appointment.status, Appointment.Status.COMPLETED)
        self.assertEqual(self.appointment.payment_method, 'qr')
        self.assertEqual(self.appointment.settlement_ref, self.intent.descriptor)
        self.assertEqual(self._balance(), Decimal('415000'))
        self.intent.refresh_from_db()
        self.assertEqual(self.intent.status, PaidTransaction.Status.SUCCESS)
        published = [call[0][0] for call in self.dispatcher.publish.call_args_list]
        self.assertIn(topics.JOB_PAYMENT_SUCCEEDED, published)

    def test_minimal_job_payment_settles_without_credit(self):
        appointment = self._appointment()
        intent, _url = self.ledger.create_job_payment_intent(
            self.client_user.pk, self.partner.pk, appointment.pk, Decimal('1')
        )

        result = self.ledger.handle_webhook({'code': intent.descriptor, 'amount': 1})

        self.assertTrue(result.ok)
        appointment.refresh_from_db()
        self.assertEqual(appointment.status, Appointment.Status.COMPLETED)
        self.assertEqual(self._balance(), Decimal('10000'))
        intent.refresh_from_db()
        self.assertEqual(intent.status, PaidTransaction.Status.SUCCESS)

    def test_amount_within_tolerance_is_accepted(self):
        result = self.ledger.handle_webhook({'description': self.intent.descriptor, 'amount': '449999'})
        self.assertTrue(result.ok)

    def test_amount_outside_tolerance_is_rejected(self):
        result = self.ledger.handle_webhook({'description': self.intent.descriptor, 'amount': '449000'})

        self.assertEqual(result.reason, 'amount_mismatch')
        self.assertEqual(self._balance(), Decimal('10000'))

    def test_deleted_appointment(self):
        Appointment.objects.filter(pk=self.appointment.pk).delete()

        result = self.ledger.handle_webhook({'description': self.intent.descriptor, 'amount': 450000})

        self.assertEqual(result.reason, 'appointment_not_found')

    def test_replay_completes_once(self):
        payload = {'description': self.intent.descriptor, 'amount': 450000}
        self.ledger.handle_webhook(payload)

        result = self.ledger.handle_webhook(payload)

        self.assertEqual(result.reason, 'not_found')
        self.assertEqual(Transaction.objects.filter(kind=Transaction.Kind.APPOINTMENT).count(), 1)

    def test_already_closed_appointment_rolls_back_claim(self):
        AppointmentService(dispatcher=Mock()).update_to_cancel(self.appointment.pk, 'Duplicate')

        result = self.ledger.handle_webhook({'description': self.intent.descriptor, 'amount': 450000})

        self.assertEqual(result.reason, 'appointment_update_failed')
        self.intent.refresh_from_db()
        self.assertEqual(self.intent.status, PaidTransaction.Status.PENDING)

    def test_intent_for_closed_appointment_is_rejected(self):
        Appointment.objects.filter(pk=self.appointment.pk).update(status=Appointment.Status.COMPLETED)

        with self.assertRaises(BusinessRule):
            self.ledger.create_job_payment_intent(
                self.client_user.pk, self.partner.pk, self.appointment.pk, Decimal('1000')
            )


class CleanupTests(LedgerTestCase):

    def _age(self, obj, hours):
        type(obj).objects.filter(pk=obj.pk).update(created_at=timezone.now() - timedelta(hours=hours))

    def test_cleanup_removes_only_stale_pending_intents(self):
        stale_top_up, _url = self.ledger.create_top_up_intent(self.partner.pk, Decimal('1000'))
        fresh_top_up, _url = self.ledger.create_top_up_intent(self.partner.pk, Decimal('2000'))
        settled, _url = self.ledger.create_top_up_intent(self.partner.pk, Decimal('3000'))
        withdraw = self.ledger.create_withdraw_intent(self.partner.pk, Decimal('4000'))
        appointment = self._appointment()
        stale_payment, _url = self.ledger.create_job_payment_intent(
            self.client_user.pk, self.partner.pk, appointment.pk, Decimal('450000')
        )
        Transaction.objects.filter(pk=settled.pk).update(status=Transaction.Status.SUCCESS)
        for obj in (stale_top_up, settled, withdraw, stale_payment):
            self._age(obj, 25)

        result = self.ledger.cleanup_expired_transactions(24)

        self.assertEqual(result, {'transactions': 1, 'paid_transactions': 1})
        remaining = set(Transaction.objects.values_list('pk', flat=True))
        self.assertEqual(remaining, {fresh_top_up.pk, settled.pk, withdraw.pk})
        self.assertFalse(PaidTransaction.objects.exists())

        self.assertEqual(
            self.ledger.cleanup_expired_transactions(24),
            {'transactions': 0, 'paid_transactions': 0},
        )

    def test_management_command(self):
        intent, _url = self.ledger.create_top_up_intent(self.partner.pk, Decimal('1000'))
        self._age(intent, 50)
        out = StringIO()

        call_command('cleanup_expired_transactions', '--max-age-hours', '48', stdout=out)

        self.assertIn('Removed 1 top-up', out.getvalue())
        self.assertFalse(Transaction.objects.filter(pk=intent.pk).exists())
