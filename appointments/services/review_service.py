import logging

from django.db import IntegrityError, transaction
from django.db.models import Avg
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import PermissionDenied

from core.exceptions import BusinessRule, Conflict, NotFound
from ..models import Appointment, Review

logger = logging.getLogger(__name__)


class ReviewService:
    """Client ratings of completed appointments."""

    def create(self, appointment_id, client, data):
        try:
            appointment = Appointment.objects.select_related('partner').get(pk=appointment_id)
        except Appointment.DoesNotExist:
            raise NotFound(_('Appointment not found.'))

        if appointment.client_id != client.pk:
            raise PermissionDenied(_('Only the client of this appointment can rate it.'))
        if appointment.status != Appointment.Status.COMPLETED:
            raise BusinessRule(_('Only completed appointments can be rated.'))
        if Review.objects.filter(appointment=appointment).exists():
            raise Conflict(_('This appointment has already been rated.'))

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    appointment=appointment,
                    client=client,
                    partner=appointment.partner,
                    rating=data['rating'],
                    comment=data.get('comment', ''),
                    images=data.get('images', []),
                )
        except IntegrityError:
            raise Conflict(_('This appointment has already been rated.'))

        logger.info(f"Review {review.rating}⭐ for appointment #{appointment.pk} by {client.email}")
        return review

    def summary_for_partner(self, partner_id):
        reviews = Review.objects.filter(partner_id=partner_id).select_related('client')
        average = reviews.aggregate(avg=Avg('rating'))['avg']
        return {
            'average': round(average, 2) if average else 0,
            'total': reviews.count(),
            'reviews': reviews,
        }
