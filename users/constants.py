"""
Constants shared across the marketplace apps.

Centralizes service categories and their display names to avoid magic strings.
"""
from django.db import models
from django.utils.translation import gettext_lazy as _


class ServiceCategory(models.TextChoices):
    ELECTRICITY = 'electricity', _('Electricity')
    WATER = 'water', _('Water')
    LOCKSMITH = 'locksmith', _('Locksmith')
    AIR_CONDITIONING = 'air_conditioning', _('Air Conditioning')


# ============================================================================
# PUSH NOTIFICATION COPY
# ============================================================================

NEW_ORDER_TITLE = _('New order')
NEW_ORDER_BODY = _('There is a new {category} request, check it now!')

NEW_BID_TITLE = _('New quote')
NEW_BID_BODY = _('A technician has quoted your request, check it now!')

BID_ACCEPTED_TITLE = _('Your quote was accepted')
BID_ACCEPTED_BODY = _('Please carry out the job you quoted!')

STATUS_CHANGED_BY_CLIENT_TITLE = _('The client updated the job status')
STATUS_CHANGED_BY_PARTNER_TITLE = _('The technician updated the job status')
STATUS_CHANGED_BODY = _('Please check the latest progress!')

APPOINTMENT_CANCELLED_TITLE = _('Appointment cancelled')
