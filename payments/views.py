"""
Payment views.

Intent endpoints return the pending record plus the QR link to pay it.
The webhook is called by the payment gateway, not by a user, and always
answers 200 with ``{"ok": ..., "reason": ...}`` once authenticated.
"""
import logging
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes, authentication_classes, throttle_classes
from rest_framework.exceptions import AuthenticationFailed, PermissionDenied
from rest_framework.response import Response
from django.conf import settings
from django.utils.crypto import constant_time_compare
from django.utils.translation import gettext_lazy as _
from django_filters.rest_framework import DjangoFilterBackend

from users.permissions import IsPartner, IsClient
from .filters import TransactionFilter
from .serializers import (
    TransactionSerializer,
    PaidTransactionSerializer,
    AmountSerializer,
    JobPaymentSerializer,
)
from .services.ledger import LedgerService
from .throttles import PaymentIntentThrottle

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsPartner])
@throttle_classes([PaymentIntentThrottle])
def create_top_up(request):
    """
    POST /api/payments/topup/

    Body: ``{"amount": 200000}``
    """
    serializer = AmountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    intent, qr_url = LedgerService().create_top_up_intent(
        request.user.pk, serializer.validated_data['amount']
    )
    return Response(
        {'transaction': TransactionSerializer(intent).data, 'qr_url': qr_url},
        status=status.HTTP_201_CREATED
    )


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsPartner])
@throttle_classes([PaymentIntentThrottle])
def create_withdraw(request):
    """
    POST /api/payments/withdraw/
    """
    serializer = AmountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    intent = LedgerService().create_withdraw_intent(
        request.user.pk, serializer.validated_data['amount']
    )
    return Response({'transaction': TransactionSerializer(intent).data}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsClient])
@throttle_classes([PaymentIntentThrottle])
def create_job_payment(request):
    """
    POST /api/payments/paid/

    Body: ``{"appointment_id": "...", "partner_id": "...", "amount": 450000}``
    """
    serializer = JobPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    intent, qr_url = LedgerService().create_job_payment_intent(
        request.user.pk, data['partner_id'], data['appointment_id'], data['amount']
    )
    return Response(
        {'transaction': PaidTransactionSerializer(intent).data, 'qr_url': qr_url},
        status=status.HTTP_201_CREATED
    )


def _check_webhook_key(request):
    expected = settings.PAYMENT_WEBHOOK_API_KEY
    if not expected:
        return
    header = request.headers.get('Authorization', '')
    scheme, _sep, key = header.partition(' ')
    if scheme.lower() != 'apikey' or not constant_time_compare(key.strip(), expected):
        logger.warning(f"Webhook rejected: bad API key from {request.META.get('REMOTE_ADDR')}")
        raise AuthenticationFailed(_('Invalid webhook key.'))


@api_view(['POST'])
@authentication_classes([])
@permission_classes([permissions.AllowAny])
@throttle_classes([])
def payment_webhook(request):
    """
    POST /api/payments/webhook/

    Bank transfer notification from the payment gateway.
    """
    _check_webhook_key(request)
    result = LedgerService().handle_webhook(request.data)
    return Response(result.as_dict(), status=status.HTTP_200_OK)


class UserTransactionListView(generics.ListAPIView):
    """
    GET /api/payments/user/{user_id}/?type=topUp&status=success&week=true&month=5&year=2025

    Users see their own history; administrators see anyone's.
    """
    serializer_class = TransactionSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = TransactionFilter

    def get_queryset(self):
        user = self.request.user
        user_id = self.kwargs['user_id']
        if user.pk != user_id and user.role != 'ADMIN':
            raise PermissionDenied(_('You can only view your own transactions.'))
        return LedgerService().transactions_for_user(user_id)
