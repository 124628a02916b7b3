from .appointment_service import AppointmentService
from .review_service import ReviewService

__all__ = ['AppointmentService', 'ReviewService']
