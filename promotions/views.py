"""
Promotion views.

Administrators manage codes; clients list the ones they can use and apply
them to their appointments.
"""
import logging
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from django.utils.translation import gettext_lazy as _

from appointments.models import Appointment
from appointments.serializers import AppointmentSerializer
from users.permissions import IsAdminRole, IsClient
from .serializers import PromotionSerializer, ApplyPromotionSerializer
from .services import PromotionEngine
from .throttles import PromotionApplyThrottle

logger = logging.getLogger(__name__)


class PromotionListCreateView(generics.ListCreateAPIView):
    """
    GET  /api/promotions/
    POST /api/promotions/   (admin)
    """
    serializer_class = PromotionSerializer

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated(), IsAdminRole()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        return PromotionEngine().list_all().prefetch_related('target_clients')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        promotion = PromotionEngine().create(dict(serializer.validated_data))
        logger.info(f"Promotion {promotion.code} created by {request.user.email}")
        return Response(PromotionSerializer(promotion).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([permissions.IsAuthenticated, IsAdminRole])
def delete_promotion(request, pk):
    """
    DELETE /api/promotions/{id}/
    """
    PromotionEngine().remove(pk)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def client_promotions(request, client_id):
    """
    GET /api/promotions/client/{client_id}/

    Promotions the client can still use right now.
    """
    if request.user.pk != client_id and request.user.role != 'ADMIN':
        raise PermissionDenied(_('You can only list your own promotions.'))
    promotions = PromotionEngine().list_eligible(client_id)
    return Response(PromotionSerializer(promotions, many=True).data)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsClient])
@throttle_classes([PromotionApplyThrottle])
def apply_promotion(request):
    """
    POST /api/promotions/apply/

    Body: ``{"appointment_id": "...", "code": "SAVE10"}``
    """
    serializer = ApplyPromotionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    appointment_id = serializer.validated_data['appointment_id']

    owner_id = Appointment.objects.filter(pk=appointment_id).values_list('client_id', flat=True).first()
    if owner_id is not None and owner_id != request.user.pk:
        raise PermissionDenied(_('You can only apply promotions to your own appointments.'))

    appointment = PromotionEngine().apply(
        appointment_id, serializer.validated_data['code'], request.user.pk
    )
    return Response(AppointmentSerializer(appointment).data)
