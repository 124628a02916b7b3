from django.db.models.signals import post_save
from django.dispatch import receiver
from django.contrib.auth import get_user_model

from .services import PromotionEngine

User = get_user_model()


@receiver(post_save, sender=User)
def grant_welcome_promotion(sender, instance, created, **kwargs):
    """
    New clients become eligible for the welcome promotion.
    """
    if created and instance.role == User.Role.CLIENT:
        PromotionEngine().add_client_to_welcome_promotion(instance)
