"""
Role based permissions reused by every app.
"""

from rest_framework.permissions import BasePermission


class IsClient(BasePermission):
    """Only authenticated users with the CLIENT role."""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.role == "CLIENT"


class IsPartner(BasePermission):
    """
    Only authenticated users with the PARTNER role.

    Used for bidding and partner profile endpoints.
    """

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.role == "PARTNER"


class IsAdminRole(BasePermission):
    """ADMIN role or Django superuser."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.role == "ADMIN" or user.is_superuser
