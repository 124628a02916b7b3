from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class TransactionStatus(models.TextChoices):
    PENDING = 'pending', _('Pending')
    SUCCESS = 'success', _('Success')
    FAILED = 'failed', _('Failed')


class Transaction(BaseModel):
    """
    Ledger entry of a user's money movement.

    Top-ups and withdrawals start ``pending`` and move at most once to
    ``success`` or ``failed``; appointment settlements are recorded
    directly as ``success``.
    """
    class Kind(models.TextChoices):
        TOP_UP = 'topUp', _('Top up')
        WITHDRAW = 'withdraw', _('Withdraw')
        APPOINTMENT = 'appointment', _('Appointment')

    Status = TransactionStatus

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='transactions',
        verbose_name=_('User')
    )
    kind = models.CharField(
        max_length=20,
        choices=Kind.choices,
        verbose_name=_('Type')
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        verbose_name=_('Amount')
    )
    status = models.CharField(
        max_length=10,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING,
        verbose_name=_('Status')
    )
    descriptor = models.CharField(
        max_length=64,
        blank=True,
        db_index=True,
        verbose_name=_('Descriptor')
    )
    balance_after = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Balance After')
    )
    payment_method = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_('Payment Method')
    )
    appointment = models.ForeignKey(
        'appointments.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions',
        verbose_name=_('Appointment')
    )

    class Meta:
        verbose_name = _('Transaction')
        verbose_name_plural = _('Transactions')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['kind', 'status', 'created_at'], name='tx_kind_status_created_idx'),
        ]

    def __str__(self):
        return f"{self.kind} {self.amount} for {self.user_id} ({self.status})"


class PaidTransaction(BaseModel):
    """Pending QR payment of an appointment, settled by the gateway webhook."""
    Status = TransactionStatus

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='payments_made',
        verbose_name=_('Client')
    )
    partner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='payments_received',
        verbose_name=_('Partner')
    )
    # Kept nullable so a webhook can still report a vanished appointment
    appointment = models.ForeignKey(
        'appointments.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='paid_transactions',
        verbose_name=_('Appointment')
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        verbose_name=_('Amount')
    )
    descriptor = models.CharField(
        max_length=64,
        db_index=True,
        verbose_name=_('Descriptor')
    )
    status = models.CharField(
        max_length=10,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING,
        verbose_name=_('Status')
    )

    class Meta:
        verbose_name = _('Paid Transaction')
        verbose_name_plural = _('Paid Transactions')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='paid_status_created_idx'),
        ]

    def __str__(self):
        return f"Payment {self.amount} for appointment {self.appointment_id} ({self.status})"
