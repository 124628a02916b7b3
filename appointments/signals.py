import logging
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from django.db.models import Avg

from users.models import PartnerProfile
from .models import Review

logger = logging.getLogger(__name__)


def _recalculate_partner_rating(partner_id):
    avg_rating = Review.objects.filter(
        partner_id=partner_id
    ).aggregate(Avg('rating'))['rating__avg']

    rating = round(avg_rating, 2) if avg_rating else 0.00
    PartnerProfile.objects.filter(user_id=partner_id).update(average_rating=rating)
    return rating


@receiver(post_save, sender=Review)
def update_partner_average_rating(sender, instance, created, **kwargs):
    """
    Recompute the partner average whenever a review is created.
    """
    if created:
        rating = _recalculate_partner_rating(instance.partner_id)
        logger.info(f"Partner {instance.partner_id} rating updated: {rating}⭐")


@receiver(post_delete, sender=Review)
def recalculate_partner_rating_on_delete(sender, instance, **kwargs):
    """
    Recompute the average without the deleted review (admin removal).
    """
    rating = _recalculate_partner_rating(instance.partner_id)
    logger.info(f"Partner {instance.partner_id} rating recalculated after review removal: {rating}⭐")
