import logging

from .models import ChatRoom

logger = logging.getLogger(__name__)


class ChatRoomService:
    """Room bookkeeping used by order matching. Message content lives elsewhere."""

    def create(self, order_id, client_id, partner_id):
        room = ChatRoom.objects.create(
            order_id=str(order_id),
            client_id=str(client_id),
            partner_id=str(partner_id),
        )
        logger.info(f"Chat room {room.pk} created for order {order_id} and partner {partner_id}")
        return room

    def delete_by_order_and_partner(self, order_id, partner_id):
        deleted, _ = ChatRoom.objects.filter(
            order_id=str(order_id), partner_id=str(partner_id)
        ).delete()
        logger.info(f"Deleted {deleted} chat room(s) for order {order_id} and partner {partner_id}")
        return deleted
