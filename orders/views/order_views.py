"""
Order views.

Posting, discovery, bidding and applicant selection. All state changes go
through ``OrderService``; domain errors render as DRF API exceptions.
"""
import logging
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from django.utils.translation import gettext_lazy as _

from appointments.serializers import AppointmentSerializer
from users.permissions import IsClient, IsPartner
from ..models import Order
from ..permissions import IsOrderOwner
from ..serializers import (
    OrderSerializer,
    OrderUpdateSerializer,
    ApplicantSerializer,
    BidSerializer,
    SelectApplicantSerializer,
)
from ..services import OrderService

logger = logging.getLogger(__name__)


class OrderListCreateView(generics.ListCreateAPIView):
    """
    GET  /api/orders/
    POST /api/orders/

    Any authenticated user may browse orders; only clients may post one.
    A client can have a single pending order at a time (409 otherwise).
    """
    serializer_class = OrderSerializer

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated(), IsClient()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        queryset = OrderService().list_orders()
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter.lower())
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService().create_order(request.user, serializer.validated_data)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class ClientOrderListView(generics.ListAPIView):
    """
    GET /api/orders/client/{client_id}/
    """
    serializer_class = OrderSerializer

    def get_queryset(self):
        return OrderService().list_by_client(self.kwargs['client_id'])


class OrderByTypesView(generics.ListAPIView):
    """
    GET /api/orders/types/?types=electricity,water

    Orders in any of the given service categories. Used by partners to browse
    jobs matching their skills.
    """
    serializer_class = OrderSerializer

    def get_queryset(self):
        types = self.request.query_params.get('types', '')
        return OrderService().list_by_categories(types.split(','))


class OrderDetailView(generics.RetrieveUpdateAPIView):
    """
    GET   /api/orders/{id}/
    PATCH /api/orders/{id}/

    Only descriptive fields are writable, and only by the owner.
    """
    queryset = Order.objects.select_related('client').prefetch_related('applicants')
    permission_classes = [permissions.IsAuthenticated, IsOrderOwner]
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_serializer_class(self):
        if self.request.method == 'PATCH':
            return OrderUpdateSerializer
        return OrderSerializer

    def perform_update(self, serializer):
        order = OrderService().update_order(serializer.instance.pk, serializer.validated_data)
        serializer.instance = order
        logger.info(f"Order #{order.pk} edited by {self.request.user.email}")


def _owned_order(request, pk):
    order = OrderService().get_order(pk)
    if order.client_id != request.user.pk:
        raise PermissionDenied(_('Only the client who posted this order can do this.'))
    return order


@api_view(['PATCH'])
@permission_classes([permissions.IsAuthenticated, IsPartner])
def add_applicant(request, pk):
    """
    PATCH /api/orders/{id}/applicants/

    The authenticated partner quotes a price on an open order.
    """
    serializer = BidSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    applicant = OrderService().add_applicant(pk, request.user, serializer.validated_data)
    return Response(ApplicantSerializer(applicant).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
@permission_classes([permissions.IsAuthenticated, IsClient])
def select_applicant(request, pk):
    """
    PATCH /api/orders/{id}/select/

    The owner picks a quote; an appointment is created for that partner.
    """
    _owned_order(request, pk)
    serializer = SelectApplicantSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    order, appointment = OrderService().select_applicant(pk, serializer.validated_data['partner_id'])
    return Response({
        'order': OrderSerializer(order).data,
        'appointment': AppointmentSerializer(appointment).data,
    })


@api_view(['PATCH'])
@permission_classes([permissions.IsAuthenticated])
def cancel_applicant(request, pk, partner_id):
    """
    PATCH /api/orders/{id}/cancel-applicant/{partner_id}/

    A partner withdraws its own quote, or the owner removes one.
    """
    if request.user.pk != partner_id:
        _owned_order(request, pk)
    order = OrderService().cancel_applicant(pk, partner_id)
    return Response(OrderSerializer(order).data)


@api_view(['PATCH'])
@permission_classes([permissions.IsAuthenticated, IsClient])
def cancel_order(request, pk):
    """
    PATCH /api/orders/{id}/cancel/
    """
    _owned_order(request, pk)
    order = OrderService().cancel_order(pk)
    return Response(OrderSerializer(order).data)
