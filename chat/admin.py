from django.contrib import admin
from .models import ChatRoom


@admin.register(ChatRoom)
class ChatRoomAdmin(admin.ModelAdmin):
    list_display = ['id', 'order_id', 'client_id', 'partner_id', 'active', 'created_at']
    list_filter = ['active']
    search_fields = ['order_id', 'client_id', 'partner_id']
