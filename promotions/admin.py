from django.contrib import admin
from .models import Promotion, PromotionUsage


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = ['code', 'kind', 'value', 'category', 'usage_count', 'usage_limit', 'is_active', 'start_date', 'end_date']
    list_filter = ['kind', 'category', 'is_active']
    search_fields = ['code', 'description']
    readonly_fields = ['usage_count', 'created_at', 'updated_at']
    filter_horizontal = ['target_clients']


@admin.register(PromotionUsage)
class PromotionUsageAdmin(admin.ModelAdmin):
    list_display = ['promotion', 'user', 'appointment', 'used_at']
    list_filter = ['used_at']
    search_fields = ['promotion__code', 'user__email']
    readonly_fields = ['used_at']
