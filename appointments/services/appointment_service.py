"""
Appointment lifecycle.

    navigation -> inspection -> working -> handover -> payment -> completed
    (any non-terminal state) -> cancelled

Completion settles the platform commission against the partner balance:
QR payments credit the partner its share, cash payments debit the platform
share the partner collected on our behalf.
"""
import logging
from decimal import Decimal, ROUND_FLOOR

from django.conf import settings
from django.db import transaction
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import APIException

from core.exceptions import BusinessRule, NotFound, ValidationError
from notifications import topics
from notifications.dispatch import NotificationDispatcher
from payments.models import Transaction
from payments.services.balance import PartnerBalance, to_amount
from users.constants import (
    BID_ACCEPTED_TITLE, BID_ACCEPTED_BODY,
    STATUS_CHANGED_BY_CLIENT_TITLE, STATUS_CHANGED_BY_PARTNER_TITLE, STATUS_CHANGED_BODY,
    APPOINTMENT_CANCELLED_TITLE,
)
from ..models import Appointment

logger = logging.getLogger(__name__)

CLIENT = 'client'
PARTNER = 'partner'

# Fields the generic update path may write
UPDATABLE_FIELDS = (
    'status',
    'agreed_price',
    'labor_cost',
    'payment_method',
    'before_work',
    'after_work',
    'additional_issues',
    'issues_approved',
    'note',
)


def commission_rate():
    return Decimal(str(settings.PLATFORM_COMMISSION_RATE))


def partner_share(amount):
    return (amount * (Decimal('1') - commission_rate())).to_integral_value(rounding=ROUND_FLOOR)


def platform_share(amount):
    return (amount * commission_rate()).to_integral_value(rounding=ROUND_FLOOR)


def appointment_payload(appointment):
    return {
        'appointment_id': appointment.pk,
        'order_id': appointment.order_id,
        'client_id': appointment.client_id,
        'partner_id': appointment.partner_id,
        'status': appointment.status,
        'agreed_price': appointment.agreed_price,
        'labor_cost': appointment.labor_cost,
        'discount': appointment.discount,
        'final_amount': appointment.final_amount,
        'payment_method': appointment.payment_method,
    }


class AppointmentService:

    def __init__(self, dispatcher=None, balance=None, promotions=None, orders=None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.balance = balance or PartnerBalance()
        self._promotions = promotions
        self._orders = orders

    @property
    def promotions(self):
        if self._promotions is None:
            from promotions.services import PromotionEngine
            self._promotions = PromotionEngine()
        return self._promotions

    @property
    def orders(self):
        if self._orders is None:
            from orders.services import OrderService
            self._orders = OrderService(dispatcher=self.dispatcher, appointments=self)
        return self._orders

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, appointment_id, for_update=False):
        queryset = Appointment.objects.select_related('order', 'client', 'partner')
        if for_update:
            queryset = queryset.select_for_update(of=('self',))
        try:
            return queryset.get(pk=appointment_id)
        except Appointment.DoesNotExist:
            raise NotFound(_('Appointment not found.'))

    def list_all(self):
        return Appointment.objects.select_related('order', 'client', 'partner')

    def get_by_order(self, order_id):
        return self.list_all().filter(order_id=order_id)

    def get_by_partner(self, partner_id):
        return self._partition(self.list_all().filter(partner_id=partner_id))

    def get_by_client(self, client_id):
        return self._partition(self.list_all().filter(client_id=client_id))

    def _partition(self, queryset):
        in_progress, history = [], []
        for appointment in queryset:
            (in_progress if appointment.is_in_progress else history).append(appointment)
        return {'in_progress': in_progress, 'history': history}

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self, order, client, partner, room=None, **terms):
        appointment = Appointment.objects.create(
            order=order,
            client=client,
            partner=partner,
            room=room,
            status=Appointment.Status.NAVIGATION,
            **terms
        )
        logger.info(f"Appointment #{appointment.pk} created for order #{order.pk} with {partner.email}")
        self.dispatcher.publish(
            topics.APPOINTMENT_CREATED,
            appointment_payload(appointment),
            [partner.pk],
            push=(BID_ACCEPTED_TITLE, BID_ACCEPTED_BODY),
        )
        return appointment

    @transaction.atomic
    def update(self, appointment_id, data, actor):
        appointment = self.get(appointment_id, for_update=True)
        if appointment.is_terminal:
            raise BusinessRule(_('This appointment is closed and can no longer change.'))

        new_status = data.get('status')
        if new_status is not None:
            low, high = Appointment.IN_PROGRESS
            if not low <= new_status <= high:
                raise BusinessRule(_('Use the complete or cancel actions to close an appointment.'))
            if new_status < appointment.status:
                raise BusinessRule(_('An appointment cannot move back to an earlier status.'))

        changed = [field for field in UPDATABLE_FIELDS if field in data]
        for field in changed:
            setattr(appointment, field, data[field])
        if changed:
            appointment.save(update_fields=changed + ['updated_at'])

        code = (data.get('promotion_code') or '').strip()
        if code and code != appointment.promotion_code:
            try:
                with transaction.atomic():
                    self.promotions.apply(appointment.pk, code, appointment.client_id)
            except APIException as e:
                logger.warning(f"Promotion {code} not applied to appointment #{appointment.pk}: {e.detail}")
            appointment.refresh_from_db()

        if actor == PARTNER:
            recipient, title = appointment.client_id, STATUS_CHANGED_BY_PARTNER_TITLE
        else:
            recipient, title = appointment.partner_id, STATUS_CHANGED_BY_CLIENT_TITLE
        self.dispatcher.publish(
            topics.APPOINTMENT_STATUS_CHANGED,
            appointment_payload(appointment),
            [recipient],
            push=(title, STATUS_CHANGED_BODY),
        )
        return appointment

    def update_to_complete(self, appointment_id, data, settlement_ref=None):
        """
        Close the appointment and settle the commission.

        Only ``payment_method``, ``partner_id`` and ``amount`` are read from
        ``data``. Without a partner or an amount nothing is settled and the
        appointment is returned unchanged.
        """
        payment_method = data.get('payment_method')
        partner_id = data.get('partner_id')
        amount = data.get('amount')

        if not partner_id or amount in (None, ''):
            logger.warning(f"Completion of appointment #{appointment_id} skipped: partner or amount missing")
            return self.get(appointment_id)

        amount = to_amount(amount)

        with transaction.atomic():
            appointment = self.get(appointment_id, for_update=True)
            if appointment.is_terminal:
                raise BusinessRule(_('This appointment is already closed.'))
            if str(partner_id) != appointment.partner_id:
                raise ValidationError({'partner_id': _('This partner is not assigned to the appointment.')})

            # A share that floors to zero settles without touching the balance
            if payment_method == Appointment.PaymentMethod.QR:
                share = partner_share(amount)
                balance_after = self.balance.credit(partner_id, share) if share > 0 else self.balance.get(partner_id)
            elif payment_method == Appointment.PaymentMethod.CASH:
                share = platform_share(amount)
                balance_after = self.balance.debit(partner_id, share) if share > 0 else self.balance.get(partner_id)
            else:
                balance_after = None
                logger.warning(f"Unknown payment method {payment_method!r} for appointment #{appointment.pk}, balance untouched")

            if balance_after is not None:
                Transaction.objects.create(
                    user_id=partner_id,
                    kind=Transaction.Kind.APPOINTMENT,
                    amount=amount,
                    status=Transaction.Status.SUCCESS,
                    descriptor=settlement_ref or '',
                    balance_after=balance_after,
                    payment_method=payment_method,
                    appointment=appointment,
                )
                appointment.payment_method = payment_method

            appointment.status = Appointment.Status.COMPLETED
            appointment.settlement_ref = settlement_ref or ''
            appointment.save(update_fields=['status', 'payment_method', 'settlement_ref', 'updated_at'])
            self.orders.mark_completed(appointment.order_id)

            logger.info(f"Appointment #{appointment.pk} completed ({payment_method}, {amount})")
            self.dispatcher.publish(
                topics.APPOINTMENT_COMPLETED,
                appointment_payload(appointment),
                [appointment.client_id, appointment.partner_id],
            )
        return appointment

    @transaction.atomic
    def update_to_cancel(self, appointment_id, reason=''):
        appointment = self.get(appointment_id, for_update=True)
        if appointment.is_terminal:
            raise BusinessRule(_('This appointment is already closed.'))

        appointment.status = Appointment.Status.CANCELLED
        appointment.cancellation_reason = reason or ''
        appointment.save(update_fields=['status', 'cancellation_reason', 'updated_at'])
        logger.info(f"Appointment #{appointment.pk} cancelled: {reason}")

        self.dispatcher.publish(
            topics.APPOINTMENT_CANCELLED,
            appointment_payload(appointment),
            [appointment.client_id],
            push=(APPOINTMENT_CANCELLED_TITLE, reason or APPOINTMENT_CANCELLED_TITLE),
        )
        return appointment
