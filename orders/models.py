from django.db import models
from django.conf import settings
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel
from users.constants import ServiceCategory


class Order(BaseModel):
    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        PROCESSING = 'processing', _('Processing')
        COMPLETED = 'completed', _('Completed')
        CANCELLED = 'cancelled', _('Cancelled')

    class Mode(models.TextChoices):
        SELECT = 'select', _('Open bidding')
        ASSIGN = 'assign', _('Direct assignment')

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='orders',
        verbose_name=_('Client')
    )
    service = models.CharField(
        max_length=150,
        verbose_name=_('Service')
    )
    category = models.CharField(
        max_length=30,
        choices=ServiceCategory.choices,
        verbose_name=_('Service Category')
    )
    description = models.TextField(
        blank=True,
        verbose_name=_('Job Description')
    )
    images = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('Images')
    )
    scheduled_for = models.DateTimeField(
        verbose_name=_('Desired Time')
    )
    address = models.CharField(
        max_length=255,
        verbose_name=_('Address')
    )
    latitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        verbose_name=_('Latitude')
    )
    longitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        verbose_name=_('Longitude')
    )
    mode = models.CharField(
        max_length=10,
        choices=Mode.choices,
        default=Mode.SELECT,
        verbose_name=_('Bidding Mode')
    )
    price_range = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('Price Range')
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        verbose_name=_('Status')
    )

    class Meta:
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['client'],
                condition=Q(status='pending'),
                name='one_pending_order_per_client'
            ),
        ]
        indexes = [
            models.Index(fields=['category', 'status'], name='order_category_status_idx'),
        ]

    @property
    def is_terminal(self):
        return self.status in (self.Status.COMPLETED, self.Status.CANCELLED)

    def __str__(self):
        return f"Order #{self.pk} - {self.client.email} ({self.category}, {self.status})"


class Applicant(models.Model):
    """A partner's bid on an order. One row per (order, partner)."""
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='applicants',
        verbose_name=_('Order')
    )
    partner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='bids',
        verbose_name=_('Partner')
    )
    name = models.CharField(
        max_length=150,
        verbose_name=_('Display Name')
    )
    avatar_url = models.URLField(
        max_length=500,
        blank=True,
        verbose_name=_('Avatar URL')
    )
    offered_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        verbose_name=_('Offered Price')
    )
    note = models.TextField(
        blank=True,
        verbose_name=_('Note')
    )
    room = models.ForeignKey(
        'chat.ChatRoom',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Chat Room')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )

    class Meta:
        verbose_name = _('Applicant')
        verbose_name_plural = _('Applicants')
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['order', 'partner'], name='one_bid_per_partner'),
        ]

    def __str__(self):
        return f"{self.partner.email} → Order #{self.order_id} ({self.offered_price})"
