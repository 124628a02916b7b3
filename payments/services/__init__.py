"""
Payment services.

``balance`` and ``descriptors`` have no dependency on other apps. The ledger
reaches into the appointment lifecycle, so import it from
``payments.services.ledger`` directly.
"""
from .balance import PartnerBalance, BalanceNotFound, InsufficientBalance

__all__ = ['PartnerBalance', 'BalanceNotFound', 'InsufficientBalance']
