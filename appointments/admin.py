from django.contrib import admin
from .models import Appointment, Review


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['id', 'order', 'client', 'partner', 'status', 'final_amount', 'payment_method', 'created_at']
    list_filter = ['status', 'payment_method', 'created_at']
    search_fields = ['id', 'order__id', 'client__email', 'partner__email', 'promotion_code']
    readonly_fields = ['id', 'final_amount', 'settlement_ref', 'created_at', 'updated_at']

    fieldsets = (
        ('Parties', {
            'fields': ('id', 'order', 'client', 'partner', 'room')
        }),
        ('Progress', {
            'fields': ('status', 'before_work', 'after_work', 'additional_issues', 'issues_approved', 'note', 'cancellation_reason')
        }),
        ('Amounts', {
            'fields': ('agreed_price', 'labor_cost', 'promotion_code', 'discount', 'final_amount', 'payment_method', 'settlement_ref')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['id', 'appointment', 'client', 'partner', 'rating', 'created_at']
    list_filter = ['rating', 'created_at']
    search_fields = ['client__email', 'partner__email', 'comment']
    readonly_fields = ['created_at']
