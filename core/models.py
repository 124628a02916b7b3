import secrets

from django.db import models
from django.utils.translation import gettext_lazy as _


def generate_object_id():
    """24 hex characters, the identifier width payment descriptors embed."""
    return secrets.token_hex(12)


class BaseModel(models.Model):
    id = models.CharField(
        primary_key=True,
        max_length=24,
        default=generate_object_id,
        editable=False
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name=_('Updated At')
    )

    class Meta:
        abstract = True
