from rest_framework import serializers
from django.utils.translation import gettext_lazy as _
from .models import Order, Applicant


class ApplicantSerializer(serializers.ModelSerializer):
    partner_id = serializers.CharField(source='partner.id', read_only=True)
    room_id = serializers.CharField(source='room.id', read_only=True, default=None)

    class Meta:
        model = Applicant
        fields = [
            'partner_id',
            'name',
            'avatar_url',
            'offered_price',
            'note',
            'room_id',
            'created_at',
        ]
        read_only_fields = ['name', 'avatar_url', 'created_at']


class OrderSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    client_email = serializers.EmailField(
        source='client.email',
        read_only=True
    )
    applicants = ApplicantSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'client',
            'client_email',
            'service',
            'category',
            'description',
            'images',
            'scheduled_for',
            'address',
            'latitude',
            'longitude',
            'mode',
            'price_range',
            'status',
            'status_display',
            'applicants',
            'created_at',
            'updated_at'
        ]
        read_only_fields = ['client', 'status', 'created_at', 'updated_at']

    def validate_images(self, value):
        if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
            raise serializers.ValidationError(_("Images must be a list of URLs."))
        return value

    def validate_latitude(self, value):
        if not -90 <= value <= 90:
            raise serializers.ValidationError(_("Latitude must be between -90 and 90."))
        return value

    def validate_longitude(self, value):
        if not -180 <= value <= 180:
            raise serializers.ValidationError(_("Longitude must be between -180 and 180."))
        return value


class OrderUpdateSerializer(OrderSerializer):
    class Meta(OrderSerializer.Meta):
        read_only_fields = OrderSerializer.Meta.read_only_fields + ['category', 'mode']


class BidSerializer(serializers.Serializer):
    offered_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    note = serializers.CharField(required=False, allow_blank=True, default='')


class SelectApplicantSerializer(serializers.Serializer):
    partner_id = serializers.CharField(max_length=24)
