"""
Orders app views.
"""
from .order_views import (
    OrderListCreateView,
    ClientOrderListView,
    OrderByTypesView,
    OrderDetailView,
    add_applicant,
    select_applicant,
    cancel_applicant,
    cancel_order,
)

__all__ = [
    'OrderListCreateView',
    'ClientOrderListView',
    'OrderByTypesView',
    'OrderDetailView',
    'add_applicant',
    'select_applicant',
    'cancel_applicant',
    'cancel_order',
]
