from django.contrib import admin
from .models import Order, Applicant


class ApplicantInline(admin.TabularInline):
    model = Applicant
    extra = 0
    readonly_fields = ['created_at']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'client', 'category', 'mode', 'status', 'scheduled_for', 'created_at']
    list_filter = ['status', 'category', 'mode', 'created_at']
    search_fields = ['id', 'client__email', 'service', 'address']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [ApplicantInline]

    fieldsets = (
        ('Client', {
            'fields': ('id', 'client')
        }),
        ('Job Details', {
            'fields': ('service', 'category', 'description', 'images', 'price_range', 'mode', 'status')
        }),
        ('Location & Time', {
            'fields': ('address', 'latitude', 'longitude', 'scheduled_for')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )
