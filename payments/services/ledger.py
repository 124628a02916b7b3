"""
Transaction ledger and payment gateway reconciliation.

Intents are stored ``pending`` with a descriptor that the client copies into
the bank transfer note. The gateway webhook echoes that note back; settlement
claims the pending row exactly once with a conditional ``pending -> success``
update inside a locked transaction, so a replayed or concurrent delivery
finds nothing left to claim.

Webhook failures are reported as ``ReconciliationResult(ok=False, reason)``
and never raised: the gateway would otherwise retry a delivery that can
never succeed.
"""
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import APIException

from appointments.models import Appointment
from appointments.services import AppointmentService
from core.exceptions import BusinessRule, NotFound, ValidationError
from notifications import topics
from notifications.dispatch import NotificationDispatcher
from ..models import Transaction, PaidTransaction
from . import descriptors
from .balance import PartnerBalance, BalanceNotFound, to_amount

logger = logging.getLogger(__name__)

User = get_user_model()


@dataclass
class ReconciliationResult:
    ok: bool
    reason: str = ''
    data: dict = field(default_factory=dict)

    def as_dict(self):
        body = {'ok': self.ok}
        if self.reason:
            body['reason'] = self.reason
        body.update(self.data)
        return body


class ReconciliationError(Exception):
    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


def webhook_text(payload):
    for key in ('description', 'content', 'code'):
        value = payload.get(key)
        if value:
            return str(value)
    return ''


def webhook_amount(payload):
    value = payload.get('amount')
    if value in (None, ''):
        value = payload.get('transferAmount')
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return amount if amount.is_finite() else None


class LedgerService:

    def __init__(self, dispatcher=None, balance=None, appointments=None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.balance = balance or PartnerBalance()
        self.appointments = appointments or AppointmentService(
            dispatcher=self.dispatcher, balance=self.balance
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def _user(self, user_id):
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFound(_('User not found.'))

    def create_top_up_intent(self, user_id, amount):
        """Returns the pending transaction and the QR link to pay it."""
        amount = to_amount(amount)
        user = self._user(user_id)
        descriptor = descriptors.build(descriptors.TOPUP, user.pk)
        intent = Transaction.objects.create(
            user=user,
            kind=Transaction.Kind.TOP_UP,
            amount=amount,
            descriptor=descriptor,
            payment_method='qr',
        )
        logger.info(f"Top-up intent {descriptor} created for {amount}")
        return intent, descriptors.qr_url(amount, descriptor)

    def create_withdraw_intent(self, user_id, amount):
        # Settled manually by an operator
        amount = to_amount(amount)
        user = self._user(user_id)
        intent = Transaction.objects.create(
            user=user,
            kind=Transaction.Kind.WITHDRAW,
            amount=amount,
        )
        logger.info(f"Withdraw request {intent.pk} of {amount} by {user.email}")
        return intent

    def create_job_payment_intent(self, client_id, partner_id, appointment_id, amount):
        amount = to_amount(amount)
        try:
            appointment = Appointment.objects.get(pk=appointment_id)
        except Appointment.DoesNotExist:
            raise NotFound(_('Appointment not found.'))
        if appointment.is_terminal:
            raise BusinessRule(_('This appointment is already closed.'))
        if appointment.client_id != str(client_id) or appointment.partner_id != str(partner_id):
            raise ValidationError(_('Client and partner do not match the appointment.'))

        descriptor = descriptors.build(descriptors.PAID, appointment.pk)
        intent = PaidTransaction.objects.create(
            client_id=appointment.client_id,
            partner_id=appointment.partner_id,
            appointment=appointment,
            amount=amount,
            descriptor=descriptor,
        )
        logger.info(f"Job payment intent {descriptor} created for {amount}")
        return intent, descriptors.qr_url(amount, descriptor)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def transactions_for_user(self, user_id):
        return Transaction.objects.filter(user_id=user_id).select_related('appointment')

    # ------------------------------------------------------------------
    # Webhook reconciliation
    # ------------------------------------------------------------------

    def handle_webhook(self, payload):
        text = webhook_text(payload)
        amount = webhook_amount(payload)
        kind = descriptors.classify(text)

        if kind is None:
            logger.warning(f"Webhook ignored, unknown transaction type: {text!r}")
            return ReconciliationResult(ok=False, reason='unknown_transaction_type')

        settle = self._settle_top_up if kind == descriptors.TOPUP else self._settle_job_payment
        try:
            with transaction.atomic():
                result = settle(text, amount)
        except ReconciliationError as e:
            logger.warning(f"Webhook {text!r} rejected: {e.reason}")
            return ReconciliationResult(ok=False, reason=e.reason)
        logger.info(f"Webhook {text!r} settled")
        return result

    @staticmethod
    def _claim(model, pk):
        """Single-use pending -> success transition."""
        claimed = model.objects.filter(
            pk=pk, status=model.Status.PENDING
        ).update(status=model.Status.SUCCESS, updated_at=timezone.now())
        if not claimed:
            raise ReconciliationError('not_found')

    @staticmethod
    def _pending_intent(queryset, prefix, object_id, timestamp_ms):
        queryset = queryset.select_for_update().filter(status=Transaction.Status.PENDING)
        if timestamp_ms:
            queryset = queryset.filter(descriptor=descriptors.build(prefix, object_id, timestamp_ms))
        else:
            queryset = queryset.filter(descriptor__startswith=f'{prefix}{object_id}')
        intent = queryset.order_by('-created_at').first()
        if intent is None:
            raise ReconciliationError('not_found')
        return intent

    def _settle_top_up(self, text, amount):
        parsed = descriptors.parse(descriptors.TOPUP_PATTERN, text)
        if parsed is None:
            raise ReconciliationError('invalid_format')
        user_id, timestamp_ms = parsed

        intent = self._pending_intent(
            Transaction.objects.filter(kind=Transaction.Kind.TOP_UP),
            descriptors.TOPUP, user_id, timestamp_ms,
        )
        if amount is None or amount != intent.amount:
            logger.warning(f"Top-up {intent.descriptor}: expected {intent.amount}, received {amount}")
            raise ReconciliationError('amount_mismatch')

        self._claim(Transaction, intent.pk)
        try:
            balance_after = self.balance.credit(intent.user_id, intent.amount)
        except BalanceNotFound:
            raise ReconciliationError('update_balance_failed')
        Transaction.objects.filter(pk=intent.pk).update(balance_after=balance_after)

        self.dispatcher.publish(
            topics.TOPUP_SUCCEEDED,
            {'transaction_id': intent.pk, 'amount': intent.amount, 'balance': balance_after},
            [intent.user_id],
        )
        return ReconciliationResult(
            ok=True,
            data={'transaction_id': intent.pk, 'balance': balance_after},
        )

    def _settle_job_payment(self, text, amount):
        parsed = descriptors.parse(descriptors.PAID_PATTERN, text)
        if parsed is None:
            raise ReconciliationError('invalid_format')
        appointment_id, timestamp_ms = parsed

        intent = self._pending_intent(
            PaidTransaction.objects.all(),
            descriptors.PAID, appointment_id, timestamp_ms,
        )
        if not Appointment.objects.filter(pk=appointment_id).exists():
            raise ReconciliationError('appointment_not_found')

        tolerance = Decimal(str(settings.PAYMENT_AMOUNT_TOLERANCE))
        if amount is None or abs(amount - intent.amount) > tolerance:
            logger.warning(f"Job payment {intent.descriptor}: expected {intent.amount}, received {amount}")
            raise ReconciliationError('amount_mismatch')

        self._claim(PaidTransaction, intent.pk)
        try:
            appointment = self.appointments.update_to_complete(
                appointment_id,
                {
                    'payment_method': Appointment.PaymentMethod.QR,
                    'partner_id': intent.partner_id,
                    'amount': intent.amount,
                },
                settlement_ref=intent.descriptor,
            )
        except BalanceNotFound:
            raise ReconciliationError('update_balance_failed')
        except APIException as e:
            logger.error(f"Appointment {appointment_id} could not be completed: {e.detail}")
            raise ReconciliationError('appointment_update_failed')

        self.dispatcher.publish(
            topics.JOB_PAYMENT_SUCCEEDED,
            {'appointment_id': appointment.pk, 'amount': intent.amount},
            [intent.client_id, intent.partner_id],
        )
        return ReconciliationResult(
            ok=True,
            data={'appointment_id': appointment.pk},
        )

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def cleanup_expired_transactions(self, max_age_hours=None):
        """Delete stale pending top-ups and job payments. Safe to run repeatedly."""
        if max_age_hours is None:
            max_age_hours = settings.PENDING_TRANSACTION_MAX_AGE_HOURS
        cutoff = timezone.now() - timedelta(hours=max_age_hours)

        top_ups, _deleted = Transaction.objects.filter(
            kind=Transaction.Kind.TOP_UP,
            status=Transaction.Status.PENDING,
            created_at__lt=cutoff,
        ).delete()
        payments, _deleted = PaidTransaction.objects.filter(
            status=PaidTransaction.Status.PENDING,
            created_at__lt=cutoff,
        ).delete()

        logger.info(f"Cleanup removed {top_ups} top-up and {payments} job payment intents older than {cutoff}")
        return {'transactions': top_ups, 'paid_transactions': payments}
