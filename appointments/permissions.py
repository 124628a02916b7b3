from rest_framework import permissions


class IsAppointmentParticipant(permissions.BasePermission):
    """The client or the partner of the appointment, or an administrator."""

    def has_object_permission(self, request, view, obj):
        user = request.user
        return (
            obj.client_id == user.pk
            or obj.partner_id == user.pk
            or user.role == 'ADMIN'
        )
