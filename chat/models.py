from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class ChatRoom(BaseModel):
    """Conversation between a client and a bidding partner about one order."""
    order_id = models.CharField(_('Order'), max_length=24, db_index=True)
    client_id = models.CharField(_('Client'), max_length=24, db_index=True)
    partner_id = models.CharField(_('Partner'), max_length=24, db_index=True)
    active = models.BooleanField(_('Active'), default=True)

    class Meta:
        verbose_name = _('Chat Room')
        verbose_name_plural = _('Chat Rooms')
        ordering = ['-created_at']

    def __str__(self):
        return f"Room {self.pk} (order {self.order_id}: {self.client_id} ↔ {self.partner_id})"
