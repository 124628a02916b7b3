"""
Users app views.

    - user_views: Current user, partner profile and device tokens
"""

from .user_views import (
    ManageUserView,
    ManagePartnerProfileView,
    register_device,
)

__all__ = [
    'ManageUserView',
    'ManagePartnerProfileView',
    'register_device',
]
