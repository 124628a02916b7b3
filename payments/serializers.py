from rest_framework import serializers
from .models import Transaction, PaidTransaction


class TransactionSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='kind', read_only=True)

    class Meta:
        model = Transaction
        fields = [
            'id',
            'user',
            'type',
            'amount',
            'status',
            'descriptor',
            'balance_after',
            'payment_method',
            'appointment',
            'created_at',
        ]
        read_only_fields = fields


class PaidTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaidTransaction
        fields = ['id', 'client', 'partner', 'appointment', 'amount', 'descriptor', 'status', 'created_at']
        read_only_fields = fields


class AmountSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=1)


class JobPaymentSerializer(AmountSerializer):
    appointment_id = serializers.CharField(max_length=24)
    partner_id = serializers.CharField(max_length=24)
