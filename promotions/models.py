from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Promotion(BaseModel):
    class Kind(models.TextChoices):
        PERCENTAGE = 'percentage', _('Percentage')
        FIXED = 'fixed', _('Fixed amount')

    class Category(models.TextChoices):
        GLOBAL = 'global', _('Global')
        PERSONAL = 'personal', _('Personal')
        WELCOME = 'welcome', _('Welcome')
        EVENT = 'event', _('Event')

    code = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Code')
    )
    description = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Description')
    )
    kind = models.CharField(
        max_length=20,
        choices=Kind.choices,
        verbose_name=_('Discount Type')
    )
    value = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        verbose_name=_('Value')
    )
    max_discount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Maximum Discount')
    )
    min_order_value = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Minimum Order Value')
    )
    start_date = models.DateTimeField(
        default=timezone.now,
        verbose_name=_('Start Date')
    )
    end_date = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('End Date')
    )
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        default=Category.GLOBAL,
        verbose_name=_('Category')
    )
    target_clients = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name='targeted_promotions',
        verbose_name=_('Target Clients')
    )
    # None means unlimited
    usage_limit = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Usage Limit')
    )
    usage_per_user = models.PositiveIntegerField(
        default=1,
        verbose_name=_('Usage Per User')
    )
    usage_count = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Usage Count')
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active')
    )

    class Meta:
        verbose_name = _('Promotion')
        verbose_name_plural = _('Promotions')
        ordering = ['-created_at']

    def is_within_window(self, moment=None):
        moment = moment or timezone.now()
        if self.start_date and moment < self.start_date:
            return False
        return self.end_date is None or moment <= self.end_date

    def __str__(self):
        return f"{self.code} ({self.kind} {self.value})"


class PromotionUsage(models.Model):
    """Append-only record of a promotion applied to an appointment."""
    promotion = models.ForeignKey(
        Promotion,
        on_delete=models.CASCADE,
        related_name='usages',
        verbose_name=_('Promotion')
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='promotion_usages',
        verbose_name=_('User')
    )
    appointment = models.ForeignKey(
        'appointments.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='promotion_usages',
        verbose_name=_('Appointment')
    )
    used_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Used At')
    )

    class Meta:
        verbose_name = _('Promotion Usage')
        verbose_name_plural = _('Promotion Usages')
        ordering = ['-used_at']
        indexes = [
            models.Index(fields=['promotion', 'user'], name='promo_usage_user_idx'),
        ]

    def __str__(self):
        return f"{self.promotion.code} used by {self.user_id}"
