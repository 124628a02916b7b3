from rest_framework import serializers
from django.utils.translation import gettext_lazy as _
from .models import Appointment, Review


class WorkEvidenceSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True, default='')
    images = serializers.ListField(child=serializers.URLField(), required=False, default=list)
    approve = serializers.BooleanField(required=False, default=False)


class AdditionalIssueSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True, default='')
    images = serializers.ListField(child=serializers.URLField(), required=False, default=list)
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, coerce_to_string=False)


class AppointmentSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    client_email = serializers.EmailField(source='client.email', read_only=True)
    partner_name = serializers.CharField(source='partner.display_name', read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id',
            'order',
            'client',
            'client_email',
            'partner',
            'partner_name',
            'room',
            'status',
            'status_display',
            'agreed_price',
            'labor_cost',
            'payment_method',
            'promotion_code',
            'discount',
            'final_amount',
            'before_work',
            'after_work',
            'additional_issues',
            'issues_approved',
            'note',
            'cancellation_reason',
            'settlement_ref',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AppointmentCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Appointment
        fields = ['order', 'partner', 'room', 'agreed_price', 'labor_cost', 'note']

    def validate(self, attrs):
        if attrs['partner'].role != 'PARTNER':
            raise serializers.ValidationError({'partner': _("The selected user is not a partner.")})
        return attrs


class AppointmentUpdateSerializer(serializers.Serializer):
    """Partial update of an appointment still in progress."""
    status = serializers.ChoiceField(choices=Appointment.Status.choices, required=False)
    agreed_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    labor_cost = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    payment_method = serializers.ChoiceField(choices=Appointment.PaymentMethod.choices, required=False)
    before_work = WorkEvidenceSerializer(required=False)
    after_work = WorkEvidenceSerializer(required=False)
    additional_issues = AdditionalIssueSerializer(many=True, required=False)
    issues_approved = serializers.BooleanField(required=False)
    note = serializers.CharField(required=False, allow_blank=True)
    promotion_code = serializers.CharField(required=False, allow_blank=True, max_length=50)

    def validate_additional_issues(self, value):
        # Stored as JSON; Decimal is not serializable there
        return [dict(issue, cost=float(issue['cost'])) for issue in value]


class CompleteAppointmentSerializer(serializers.Serializer):
    payment_method = serializers.CharField(required=False, allow_blank=True, default='')
    partner_id = serializers.CharField(required=False, allow_blank=True, max_length=24)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)


class CancelAppointmentSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class ReviewSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.display_name', read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'appointment', 'client', 'client_name', 'partner', 'rating', 'comment', 'images', 'created_at']
        read_only_fields = ['id', 'appointment', 'client', 'client_name', 'partner', 'created_at']

    def validate_images(self, value):
        if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
            raise serializers.ValidationError(_("Images must be a list of URLs."))
        return value
