"""
User and partner profile views.
"""
import logging
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.shortcuts import get_object_or_404

from ..models import PartnerProfile, DeviceToken
from ..permissions import IsPartner
from ..serializers import UserSerializer, PartnerProfileSerializer, DeviceTokenSerializer
from ..services import PartnerDirectory

logger = logging.getLogger(__name__)


class ManageUserView(generics.RetrieveUpdateAPIView):
    """
    GET/PATCH /api/users/me/

    Retrieve or update the authenticated user.
    """
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


class ManagePartnerProfileView(generics.RetrieveUpdateAPIView):
    """
    GET/PATCH /api/users/partners/me/

    Balance, rating and availability of the authenticated partner.
    Only ``is_online`` is writable; balance moves through the payments app.
    """
    serializer_class = PartnerProfileSerializer
    permission_classes = [permissions.IsAuthenticated, IsPartner]

    def get_object(self):
        return get_object_or_404(
            PartnerProfile.objects.select_related('user').prefetch_related('skills'),
            user=self.request.user
        )

    def perform_update(self, serializer):
        if 'is_online' in serializer.validated_data:
            PartnerDirectory().set_online(
                self.request.user.id, serializer.validated_data['is_online']
            )
            serializer.instance.refresh_from_db()
            return
        serializer.save()


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def register_device(request):
    """
    POST /api/users/devices/

    Register a push notification token for the authenticated user.
    """
    serializer = DeviceTokenSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    device, created = DeviceToken.objects.update_or_create(
        token=serializer.validated_data['token'],
        defaults={
            'user': request.user,
            'platform': serializer.validated_data.get('platform', ''),
        }
    )
    logger.info(f"Device token registered for {request.user.email}")
    return Response(
        DeviceTokenSerializer(device).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
    )
