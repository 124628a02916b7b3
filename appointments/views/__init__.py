"""
Appointments app views.

Organized into focused modules:
    - appointment_views: Lifecycle endpoints
    - review_views: Ratings of completed appointments
"""
from .appointment_views import (
    AppointmentCreateView,
    AppointmentDetailView,
    complete_appointment,
    cancel_appointment,
    partner_appointments,
    client_appointments,
    OrderAppointmentListView,
)
from .review_views import (
    create_review,
    partner_reviews,
)

__all__ = [
    'AppointmentCreateView',
    'AppointmentDetailView',
    'complete_appointment',
    'cancel_appointment',
    'partner_appointments',
    'client_appointments',
    'OrderAppointmentListView',
    'create_review',
    'partner_reviews',
]
