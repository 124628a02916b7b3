from django.contrib import admin
from .models import Transaction, PaidTransaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'kind', 'amount', 'status', 'balance_after', 'created_at']
    list_filter = ['kind', 'status', 'payment_method', 'created_at']
    search_fields = ['id', 'user__email', 'descriptor']
    readonly_fields = ['id', 'descriptor', 'balance_after', 'created_at', 'updated_at']


@admin.register(PaidTransaction)
class PaidTransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'appointment', 'client', 'partner', 'amount', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['id', 'descriptor', 'client__email', 'partner__email']
    readonly_fields = ['id', 'descriptor', 'created_at', 'updated_at']
