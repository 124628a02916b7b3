"""
Order matching: job posting, partner discovery, bidding and selection.

Selection is the single hand-off point from an Order to an Appointment.
State changes run inside ``transaction.atomic()``; notifications are
published through the dispatcher and therefore only leave the process once
the change is committed.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from chat.services import ChatRoomService
from core.exceptions import BusinessRule, Conflict, NotFound
from notifications import topics
from notifications.dispatch import NotificationDispatcher
from users.constants import (
    NEW_ORDER_TITLE, NEW_ORDER_BODY,
    NEW_BID_TITLE, NEW_BID_BODY,
)
from users.services import PartnerDirectory
from ..models import Order, Applicant

logger = logging.getLogger(__name__)

# Fields a client may still edit after posting
EDITABLE_FIELDS = (
    'service', 'description', 'images', 'scheduled_for',
    'address', 'latitude', 'longitude', 'price_range',
)


def order_payload(order):
    return {
        'order_id': order.pk,
        'client_id': order.client_id,
        'service': order.service,
        'category': order.category,
        'address': order.address,
        'scheduled_for': order.scheduled_for,
        'price_range': order.price_range,
        'status': order.status,
    }


class OrderService:

    def __init__(self, dispatcher=None, chat_rooms=None, directory=None, appointments=None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.chat_rooms = chat_rooms or ChatRoomService()
        self.directory = directory or PartnerDirectory()
        self._appointments = appointments

    @property
    def appointments(self):
        if self._appointments is None:
            from appointments.services import AppointmentService
            self._appointments = AppointmentService(dispatcher=self.dispatcher)
        return self._appointments

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id, for_update=False):
        queryset = Order.objects.select_related('client')
        if for_update:
            queryset = queryset.select_for_update(of=('self',))
        try:
            return queryset.get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound(_('Order not found.'))

    def list_orders(self):
        return Order.objects.select_related('client').prefetch_related('applicants')

    def list_by_client(self, client_id):
        return self.list_orders().filter(client_id=client_id)

    def list_by_categories(self, categories):
        categories = [c for c in categories if c]
        if not categories:
            return Order.objects.none()
        return self.list_orders().filter(category__in=categories)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, client, data):
        if Order.objects.filter(client=client, status=Order.Status.PENDING).exists():
            raise Conflict(_('You already have a pending order.'))

        try:
            with transaction.atomic():
                order = Order.objects.create(client=client, **data)
        except IntegrityError:
            # A concurrent request won the partial unique constraint
            raise Conflict(_('You already have a pending order.'))

        logger.info(f"Order #{order.pk} created by {client.email} ({order.category})")

        try:
            partner_ids = self.directory.eligible_partner_ids(order.category)
        except Exception as e:
            logger.warning(f"Partner lookup for order #{order.pk} failed: {e}")
            partner_ids = []

        if partner_ids:
            body = str(NEW_ORDER_BODY).format(category=order.get_category_display())
            self.dispatcher.publish(
                topics.ORDER_CREATED,
                order_payload(order),
                partner_ids,
                push=(NEW_ORDER_TITLE, body),
            )
        else:
            logger.info(f"No eligible partners online for order #{order.pk}")
        return order

    def update_order(self, order_id, data):
        order = self.get_order(order_id)
        changed = [field for field in EDITABLE_FIELDS if field in data]
        for field in changed:
            setattr(order, field, data[field])
        if changed:
            order.save(update_fields=changed + ['updated_at'])
        return order

    @transaction.atomic
    def add_applicant(self, order_id, partner, bid):
        order = self.get_order(order_id, for_update=True)

        if order.status != Order.Status.PENDING:
            raise BusinessRule(_('This order is no longer accepting quotes.'))
        if order.mode != Order.Mode.SELECT:
            raise BusinessRule(_('This order does not accept open bidding.'))
        if order.applicants.filter(partner=partner).exists():
            raise Conflict(_('You have already quoted this order.'))

        room = None
        try:
            with transaction.atomic():
                room = self.chat_rooms.create(order.pk, order.client_id, partner.pk)
        except Exception as e:
            logger.warning(f"Chat room for order #{order.pk} and partner {partner.pk} not created: {e}")

        try:
            with transaction.atomic():
                applicant = Applicant.objects.create(
                    order=order,
                    partner=partner,
                    name=bid.get('name') or partner.display_name,
                    avatar_url=bid.get('avatar_url') or partner.avatar_url,
                    offered_price=bid['offered_price'],
                    note=bid.get('note', ''),
                    room=room,
                )
        except IntegrityError:
            raise Conflict(_('You have already quoted this order.'))

        logger.info(f"Partner {partner.email} quoted {applicant.offered_price} on order #{order.pk}")

        self.dispatcher.publish(
            topics.ORDER_BID_ADDED,
            {'order_id': order.pk, 'partner_id': partner.pk, 'offered_price': applicant.offered_price},
            [order.client_id],
            push=(NEW_BID_TITLE, NEW_BID_BODY),
        )
        return applicant

    @transaction.atomic
    def cancel_applicant(self, order_id, partner_id):
        order = self.get_order(order_id, for_update=True)
        if order.is_terminal:
            raise BusinessRule(_('Quotes cannot be withdrawn from a closed order.'))

        deleted, _deleted_by_model = order.applicants.filter(partner_id=partner_id).delete()
        if not deleted:
            raise NotFound(_('Applicant not found.'))

        try:
            with transaction.atomic():
                self.chat_rooms.delete_by_order_and_partner(order.pk, partner_id)
        except Exception as e:
            logger.warning(f"Chat room for order #{order.pk} and partner {partner_id} not removed: {e}")

        logger.info(f"Partner {partner_id} withdrew from order #{order.pk}")
        return order

    @transaction.atomic
    def select_applicant(self, order_id, partner_id):
        order = self.get_order(order_id, for_update=True)
        if order.status != Order.Status.PENDING:
            raise BusinessRule(_('An applicant can no longer be selected for this order.'))

        applicant = order.applicants.select_related('partner').filter(partner_id=partner_id).first()
        if applicant is None:
            raise NotFound(_('Applicant not found.'))

        order.status = Order.Status.PROCESSING
        order.save(update_fields=['status', 'updated_at'])
        order.applicants.exclude(pk=applicant.pk).delete()

        appointment = self.appointments.create(
            order=order,
            client=order.client,
            partner=applicant.partner,
            room=applicant.room,
            agreed_price=applicant.offered_price,
        )
        logger.info(f"Order #{order.pk} assigned to {applicant.partner.email}, appointment #{appointment.pk}")

        self.dispatcher.publish(
            topics.ORDER_APPLICANT_SELECTED,
            {'order_id': order.pk, 'appointment_id': appointment.pk},
            [applicant.partner_id],
        )
        return order, appointment

    @transaction.atomic
    def cancel_order(self, order_id):
        order = self.get_order(order_id, for_update=True)
        if order.status == Order.Status.COMPLETED:
            raise BusinessRule(_('A completed order cannot be cancelled.'))
        if order.status != Order.Status.CANCELLED:
            order.status = Order.Status.CANCELLED
            order.save(update_fields=['status', 'updated_at'])
            logger.info(f"Order #{order.pk} cancelled")
        return order

    def mark_completed(self, order_id):
        updated = Order.objects.filter(pk=order_id).exclude(
            status=Order.Status.CANCELLED
        ).update(status=Order.Status.COMPLETED, updated_at=timezone.now())
        if not updated:
            logger.warning(f"Order #{order_id} could not be marked completed")
        return bool(updated)
