"""
Payment descriptors and QR deep links.

A descriptor is the transfer note the client's bank echoes back in the
gateway webhook: ``TOPUP<userId>_<epochMs>`` for wallet top-ups and
``PAID<appointmentId>_<epochMs>`` for job payments. Ids are 24 hex chars.
"""
import re
import time
from decimal import Decimal
from urllib.parse import urlencode

from django.conf import settings

TOPUP = 'TOPUP'
PAID = 'PAID'

TOPUP_PATTERN = re.compile(r'TOPUP([0-9a-fA-F]{24})(?:_(\d{13}))?', re.IGNORECASE)
PAID_PATTERN = re.compile(r'PAID([0-9a-fA-F]{24})(?:_(\d{13}))?', re.IGNORECASE)


def build(prefix, object_id, timestamp_ms=None):
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f'{prefix}{object_id}_{timestamp_ms}'


def classify(text):
    """``TOPUP``, ``PAID`` or ``None`` for an unrelated transfer."""
    upper = (text or '').upper()
    if TOPUP in upper:
        return TOPUP
    if PAID in upper:
        return PAID
    return None


def parse(pattern, text):
    """
    Returns ``(object_id, timestamp_ms)``; the timestamp is ``None`` when the
    bank truncated it. Returns ``None`` for a malformed descriptor.
    """
    match = pattern.search(text or '')
    if not match:
        return None
    object_id, timestamp_ms = match.groups()
    return object_id.lower(), timestamp_ms


def format_amount(amount):
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return str(int(amount))
    return str(amount.normalize())


def qr_url(amount, descriptor):
    params = urlencode({
        'acc': settings.PAYMENT_QR_ACCOUNT,
        'bank': settings.PAYMENT_QR_BANK,
        'amount': format_amount(amount),
        'des': descriptor,
    })
    return f'{settings.PAYMENT_QR_BASE_URL}?{params}'
