"""Realtime event names published to connected clients and partners."""

ORDER_CREATED = 'order-created'
ORDER_BID_ADDED = 'order-bid-added'
ORDER_APPLICANT_SELECTED = 'order-applicant-selected'
APPOINTMENT_CREATED = 'appointment-created'
APPOINTMENT_STATUS_CHANGED = 'appointment-status-changed'
APPOINTMENT_COMPLETED = 'appointment-completed'
APPOINTMENT_CANCELLED = 'appointment-cancelled'
TOPUP_SUCCEEDED = 'topup-succeeded'
JOB_PAYMENT_SUCCEEDED = 'job-payment-succeeded'


def user_group(user_id):
    """Channels group every socket of a user joins."""
    return f'user_{user_id}'
