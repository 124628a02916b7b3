"""
Business logic services for users app.

    - PartnerDirectory: eligible partner lookup and availability flags
"""

from .partner_directory import PartnerDirectory

__all__ = [
    'PartnerDirectory',
]
