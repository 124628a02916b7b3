from django.db.models.signals import post_save
from django.dispatch import receiver
from django.contrib.auth import get_user_model
from .models import PartnerProfile
import logging

User = get_user_model()
logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_partner_profile(sender, instance, created, **kwargs):
    """
    Creates the PartnerProfile holding balance and availability when a PARTNER registers.
    """
    if created and instance.role == User.Role.PARTNER:
        PartnerProfile.objects.create(user=instance)
        logger.info(f"PartnerProfile created automatically for user {instance.email}")
