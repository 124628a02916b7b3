from rest_framework import permissions


class IsOrderOwner(permissions.BasePermission):
    """Only the client who posted the order may change it."""

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.client_id == request.user.pk
