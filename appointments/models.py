from decimal import Decimal

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Appointment(BaseModel):
    class Status(models.IntegerChoices):
        NAVIGATION = 1, _('On the way')
        INSPECTION = 2, _('Inspecting')
        WORKING = 3, _('Working')
        HANDOVER = 4, _('Handover')
        PAYMENT = 5, _('Awaiting payment')
        COMPLETED = 6, _('Completed')
        CANCELLED = 7, _('Cancelled')

    class PaymentMethod(models.TextChoices):
        QR = 'qr', _('Bank transfer (QR)')
        CASH = 'cash', _('Cash')

    # Closed range of statuses still being worked on
    IN_PROGRESS = (Status.NAVIGATION, Status.PAYMENT)
    TERMINAL = (Status.COMPLETED, Status.CANCELLED)

    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.CASCADE,
        related_name='appointments',
        verbose_name=_('Order')
    )
    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='client_appointments',
        verbose_name=_('Client')
    )
    partner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='partner_appointments',
        verbose_name=_('Partner')
    )
    room = models.ForeignKey(
        'chat.ChatRoom',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Chat Room')
    )
    status = models.PositiveSmallIntegerField(
        choices=Status.choices,
        default=Status.NAVIGATION,
        verbose_name=_('Status')
    )
    agreed_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0)],
        verbose_name=_('Agreed Price')
    )
    labor_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0)],
        verbose_name=_('Labor Cost')
    )
    payment_method = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
        blank=True,
        verbose_name=_('Payment Method')
    )
    promotion_code = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_('Promotion Code')
    )
    discount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name=_('Promotion Discount')
    )
    final_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name=_('Final Amount')
    )
    # {"note": str, "images": [url], "approve": bool}
    before_work = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Before Work Evidence')
    )
    after_work = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('After Work Evidence')
    )
    # [{"note": str, "images": [url], "cost": number}]
    additional_issues = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('Additional Issues')
    )
    issues_approved = models.BooleanField(
        default=False,
        verbose_name=_('Additional Issues Approved')
    )
    note = models.TextField(
        blank=True,
        verbose_name=_('Note')
    )
    cancellation_reason = models.TextField(
        blank=True,
        verbose_name=_('Cancellation Reason')
    )
    settlement_ref = models.CharField(
        max_length=64,
        blank=True,
        verbose_name=_('Settlement Reference')
    )

    class Meta:
        verbose_name = _('Appointment')
        verbose_name_plural = _('Appointments')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['partner', 'status'], name='appt_partner_status_idx'),
            models.Index(fields=['client', 'status'], name='appt_client_status_idx'),
        ]

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL

    @property
    def is_in_progress(self):
        low, high = self.IN_PROGRESS
        return low <= self.status <= high

    def compute_final_amount(self):
        total = (self.agreed_price or 0) + (self.labor_cost or 0) - (self.discount or 0)
        return max(Decimal(total), Decimal('0.00'))

    def save(self, *args, **kwargs):
        self.final_amount = self.compute_final_amount()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'final_amount' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['final_amount']
        super().save(*args, **kwargs)

    def __str__(self):
        return f"Appointment #{self.pk} - order {self.order_id} ({self.get_status_display()})"


class Review(models.Model):
    """
    A client's rating of a completed appointment.

    One review per appointment; ``signals`` keeps the partner's
    average rating in sync.
    """
    appointment = models.OneToOneField(
        Appointment,
        on_delete=models.CASCADE,
        related_name='review',
        verbose_name=_('Appointment')
    )
    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reviews_written',
        verbose_name=_('Client')
    )
    partner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reviews_received',
        verbose_name=_('Partner')
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        verbose_name=_('Rating')
    )
    comment = models.TextField(
        blank=True,
        verbose_name=_('Comment')
    )
    images = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('Images')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )

    class Meta:
        verbose_name = _('Review')
        verbose_name_plural = _('Reviews')
        ordering = ['-created_at']

    def __str__(self):
        return f"Review {self.rating}⭐ for appointment #{self.appointment_id}"
