"""
Promotion eligibility and discount computation.

The global usage counter is incremented with a conditional update
(``usage_count < usage_limit``) so a code can never be redeemed past its
cap, even when two clients apply it at the same moment.
"""
import logging
from decimal import Decimal, ROUND_DOWN

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from appointments.models import Appointment
from core.exceptions import BusinessRule, Conflict, NotFound
from ..models import Promotion, PromotionUsage

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def compute_discount(promotion, agreed_price):
    if promotion.kind == Promotion.Kind.PERCENTAGE:
        discount = (Decimal(agreed_price) * promotion.value / Decimal('100')).quantize(CENT, rounding=ROUND_DOWN)
        if promotion.max_discount is not None:
            discount = min(discount, promotion.max_discount)
        return discount
    return promotion.value


class PromotionEngine:

    def list_all(self):
        return Promotion.objects.all()

    def list_eligible(self, client_id):
        now = timezone.now()
        candidates = list(
            Promotion.objects.filter(is_active=True)
            .filter(
                Q(category=Promotion.Category.GLOBAL)
                | Q(
                    category__in=[Promotion.Category.WELCOME, Promotion.Category.PERSONAL],
                    target_clients__id=client_id,
                )
                | (
                    Q(category=Promotion.Category.EVENT, start_date__lte=now)
                    & (Q(end_date__isnull=True) | Q(end_date__gte=now))
                )
            )
            .distinct()
        )
        used = dict(
            PromotionUsage.objects.filter(user_id=client_id, promotion__in=candidates)
            .order_by()
            .values_list('promotion_id')
            .annotate(n=Count('id'))
        )
        return [p for p in candidates if used.get(p.pk, 0) < p.usage_per_user]

    def apply(self, appointment_id, code, user_id):
        """
        Apply ``code`` to the appointment on behalf of ``user_id``.

        Writes the code, the discount and the recomputed final amount, bumps
        the usage counter and appends a usage row. Returns the appointment.
        """
        promotion = Promotion.objects.filter(code__iexact=(code or '').strip(), is_active=True).first()
        if promotion is None:
            raise NotFound(_('Promotion code not found.'))

        with transaction.atomic():
            try:
                appointment = Appointment.objects.select_for_update().get(pk=appointment_id)
            except Appointment.DoesNotExist:
                raise NotFound(_('Appointment not found.'))
            if appointment.is_terminal:
                raise BusinessRule(_('This appointment is already closed.'))

            if not promotion.is_within_window():
                raise BusinessRule(_('This promotion is not valid at this time.'))

            targets = promotion.target_clients.all()
            if targets.exists() and not targets.filter(pk=user_id).exists():
                raise BusinessRule(_('This promotion is not available for your account.'))

            used = PromotionUsage.objects.filter(promotion=promotion, user_id=user_id).count()
            if used >= promotion.usage_per_user:
                raise BusinessRule(_('You have already used this promotion.'))

            if promotion.usage_limit is not None and promotion.usage_count >= promotion.usage_limit:
                raise BusinessRule(_('This promotion has been fully redeemed.'))

            base_amount = appointment.agreed_price + appointment.labor_cost
            if promotion.min_order_value is not None and base_amount < promotion.min_order_value:
                raise BusinessRule(_('The order value is below the minimum for this promotion.'))

            counter = Promotion.objects.filter(pk=promotion.pk)
            if promotion.usage_limit is not None:
                counter = counter.filter(usage_count__lt=F('usage_limit'))
            if not counter.update(usage_count=F('usage_count') + 1):
                raise BusinessRule(_('This promotion has been fully redeemed.'))

            appointment.promotion_code = promotion.code
            appointment.discount = compute_discount(promotion, appointment.agreed_price)
            appointment.save(update_fields=['promotion_code', 'discount', 'updated_at'])

            PromotionUsage.objects.create(
                promotion=promotion,
                user_id=user_id,
                appointment=appointment,
            )

        logger.info(
            f"Promotion {promotion.code} applied to appointment #{appointment.pk}: "
            f"-{appointment.discount}, final {appointment.final_amount}"
        )
        return appointment

    def create(self, data):
        targets = data.pop('target_clients', [])
        if Promotion.objects.filter(code__iexact=data['code']).exists():
            raise Conflict(_('A promotion with this code already exists.'))
        try:
            with transaction.atomic():
                promotion = Promotion.objects.create(**data)
        except IntegrityError:
            raise Conflict(_('A promotion with this code already exists.'))
        if targets:
            promotion.target_clients.set(targets)
        logger.info(f"Promotion {promotion.code} created")
        return promotion

    def remove(self, promotion_id):
        deleted, _deleted_by_model = Promotion.objects.filter(pk=promotion_id).delete()
        if not deleted:
            raise NotFound(_('Promotion not found.'))
        logger.info(f"Promotion {promotion_id} removed")

    def add_client_to_welcome_promotion(self, client):
        promotion = Promotion.objects.filter(
            code=settings.WELCOME_PROMOTION_CODE, is_active=True
        ).first()
        if promotion is None:
            logger.debug(f"No active welcome promotion {settings.WELCOME_PROMOTION_CODE}")
            return False
        promotion.target_clients.add(client)
        logger.info(f"Client {client.email} added to welcome promotion {promotion.code}")
        return True
