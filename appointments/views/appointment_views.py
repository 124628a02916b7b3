"""
Appointment views.

Every state change is delegated to ``AppointmentService``.
"""
import logging
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from django.utils.translation import gettext_lazy as _

from ..models import Appointment
from ..permissions import IsAppointmentParticipant
from ..serializers import (
    AppointmentSerializer,
    AppointmentCreateSerializer,
    AppointmentUpdateSerializer,
    CompleteAppointmentSerializer,
    CancelAppointmentSerializer,
)
from ..services import AppointmentService
from ..services.appointment_service import CLIENT, PARTNER

logger = logging.getLogger(__name__)


def _participant_appointment(request, pk):
    appointment = AppointmentService().get(pk)
    if not IsAppointmentParticipant().has_object_permission(request, None, appointment):
        raise PermissionDenied(_('You are not part of this appointment.'))
    return appointment


class AppointmentCreateView(generics.CreateAPIView):
    """
    POST /api/appointments/

    Direct assignment of a partner to an order by its client (or an admin).
    Open bidding creates appointments through order selection instead.
    """
    serializer_class = AppointmentCreateSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        order = data.pop('order')
        if order.client_id != request.user.pk and request.user.role != 'ADMIN':
            raise PermissionDenied(_('Only the client who posted this order can do this.'))

        appointment = AppointmentService().create(
            order=order,
            client=order.client,
            partner=data.pop('partner'),
            room=data.pop('room', None),
            **data
        )
        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)


class AppointmentDetailView(generics.RetrieveUpdateAPIView):
    """
    GET   /api/appointments/{id}/
    PATCH /api/appointments/{id}/

    The counterparty of the caller is notified of every update.
    """
    queryset = Appointment.objects.select_related('order', 'client', 'partner')
    serializer_class = AppointmentSerializer
    permission_classes = [permissions.IsAuthenticated, IsAppointmentParticipant]
    http_method_names = ['get', 'patch', 'head', 'options']

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = AppointmentUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        actor = PARTNER if request.user.pk == instance.partner_id else CLIENT
        appointment = AppointmentService().update(instance.pk, serializer.validated_data, actor)
        logger.info(f"Appointment #{appointment.pk} updated by {request.user.email}")
        return Response(AppointmentSerializer(appointment).data)


@api_view(['PATCH'])
@permission_classes([permissions.IsAuthenticated])
def complete_appointment(request, pk):
    """
    PATCH /api/appointments/{id}/complete/

    Body: ``{"payment_method": "cash"|"qr", "partner_id": "...", "amount": 450000}``
    """
    _participant_appointment(request, pk)
    serializer = CompleteAppointmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    appointment = AppointmentService().update_to_complete(pk, serializer.validated_data)
    return Response(AppointmentSerializer(appointment).data)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def cancel_appointment(request, pk):
    """
    POST /api/appointments/{id}/cancel/
    """
    _participant_appointment(request, pk)
    serializer = CancelAppointmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    appointment = AppointmentService().update_to_cancel(pk, serializer.validated_data['reason'])
    return Response(AppointmentSerializer(appointment).data)


def _partitioned_response(partition):
    return Response({
        'in_progress': AppointmentSerializer(partition['in_progress'], many=True).data,
        'history': AppointmentSerializer(partition['history'], many=True).data,
    })


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def partner_appointments(request, partner_id):
    """
    GET /api/appointments/partner/{partner_id}/
    """
    return _partitioned_response(AppointmentService().get_by_partner(partner_id))


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def client_appointments(request, client_id):
    """
    GET /api/appointments/client/{client_id}/
    """
    return _partitioned_response(AppointmentService().get_by_client(client_id))


class OrderAppointmentListView(generics.ListAPIView):
    """
    GET /api/appointments/order/{order_id}/
    """
    serializer_class = AppointmentSerializer
    pagination_class = None

    def get_queryset(self):
        return AppointmentService().get_by_order(self.kwargs['order_id'])
