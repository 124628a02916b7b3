from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.utils.translation import gettext_lazy as _

from core.models import generate_object_id
from .constants import ServiceCategory
from .managers import CustomUserManager


class User(AbstractBaseUser, PermissionsMixin):
    class Role(models.TextChoices):
        ADMIN = "ADMIN", _("Administrator")
        CLIENT = "CLIENT", _("Client")
        PARTNER = "PARTNER", _("Partner")

    id = models.CharField(primary_key=True, max_length=24, default=generate_object_id, editable=False)
    email = models.EmailField(unique=True)
    first_name = models.CharField(_("First Name"), max_length=150, blank=True)
    last_name = models.CharField(_("Last Name"), max_length=150, blank=True)
    phone_number = models.CharField(_("Phone Number"), max_length=20, blank=True)
    role = models.CharField(max_length=50, choices=Role.choices, default=Role.CLIENT)

    avatar_url = models.URLField(_("Avatar URL"), max_length=500, blank=True)

    is_staff = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    date_joined = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    @property
    def display_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.email

    def __str__(self):
        return f"{self.email} ({self.role})"


class PartnerProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='partner_profile')
    # Mutated only through payments.services.balance.PartnerBalance
    balance = models.DecimalField(_("Balance"), max_digits=14, decimal_places=2, default=0)
    is_online = models.BooleanField(_("Online"), default=False)
    is_locked = models.BooleanField(_("Locked"), default=False)
    last_online_at = models.DateTimeField(_("Last Online At"), null=True, blank=True)
    average_rating = models.DecimalField(_("Average Rating"), max_digits=3, decimal_places=2, default=0.0)

    def __str__(self):
        return f"Partner profile of {self.user.email}"


class PartnerSkill(models.Model):
    """A service category a partner applied for during KYC."""
    profile = models.ForeignKey(PartnerProfile, on_delete=models.CASCADE, related_name='skills')
    category = models.CharField(_("Category"), max_length=30, choices=ServiceCategory.choices)
    is_approved = models.BooleanField(_("Approved"), default=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['profile', 'category'], name='unique_partner_skill'),
        ]

    def __str__(self):
        return f"{self.profile.user.email} - {self.category}"


class DeviceToken(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='device_tokens')
    token = models.CharField(_("Token"), max_length=255, unique=True)
    platform = models.CharField(_("Platform"), max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.email} ({self.platform or 'unknown'})"
