from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from .models import Promotion

User = get_user_model()


class PromotionSerializer(serializers.ModelSerializer):
    target_clients = serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=User.objects.filter(role='CLIENT'),
        required=False
    )

    class Meta:
        model = Promotion
        fields = [
            'id',
            'code',
            'description',
            'kind',
            'value',
            'max_discount',
            'min_order_value',
            'start_date',
            'end_date',
            'category',
            'target_clients',
            'usage_limit',
            'usage_per_user',
            'usage_count',
            'is_active',
            'created_at',
        ]
        read_only_fields = ['id', 'usage_count', 'created_at']
        # Duplicates are reported as 409 by the engine
        extra_kwargs = {'code': {'validators': []}}

    def validate_code(self, value):
        return value.strip().upper()

    def validate(self, attrs):
        kind = attrs.get('kind')
        value = attrs.get('value')
        if kind == Promotion.Kind.PERCENTAGE and value is not None and value > 100:
            raise serializers.ValidationError({'value': _("A percentage cannot exceed 100.")})
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': _("The end date must be after the start date.")})
        return attrs


class ApplyPromotionSerializer(serializers.Serializer):
    appointment_id = serializers.CharField(max_length=24)
    code = serializers.CharField(max_length=50)
