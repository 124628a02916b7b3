"""
Partner discovery for order matching.

A partner is eligible for an order when one of its approved skills matches
the order category, it is currently online and it is not locked.
"""
import logging

from django.utils import timezone

from users.models import PartnerProfile

logger = logging.getLogger(__name__)


class PartnerDirectory:

    def eligible_partners(self, category):
        return (
            PartnerProfile.objects.filter(
                skills__category=category,
                skills__is_approved=True,
                is_online=True,
                is_locked=False,
                user__is_active=True,
            )
            .select_related('user')
            .distinct()
        )

    def eligible_partner_ids(self, category):
        """User ids of the partners that should hear about a new order."""
        ids = list(self.eligible_partners(category).values_list('user_id', flat=True))
        logger.debug(f"{len(ids)} eligible partners for category {category}")
        return ids

    def set_online(self, user_id, online):
        fields = {'is_online': online}
        if online:
            fields['last_online_at'] = timezone.now()
        updated = PartnerProfile.objects.filter(user_id=user_id).update(**fields)
        if updated:
            logger.info(f"Partner {user_id} is now {'online' if online else 'offline'}")
        return bool(updated)
