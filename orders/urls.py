from django.urls import path
from .views import (
    OrderListCreateView,
    ClientOrderListView,
    OrderByTypesView,
    OrderDetailView,
    add_applicant,
    select_applicant,
    cancel_applicant,
    cancel_order,
)

urlpatterns = [
    path('', OrderListCreateView.as_view(), name='order-list-create'),
    path('client/<str:client_id>/', ClientOrderListView.as_view(), name='order-client-list'),
    path('types/', OrderByTypesView.as_view(), name='order-by-types'),
    path('<str:pk>/', OrderDetailView.as_view(), name='order-detail'),
    path('<str:pk>/applicants/', add_applicant, name='order-add-applicant'),
    path('<str:pk>/select/', select_applicant, name='order-select-applicant'),
    path('<str:pk>/cancel-applicant/<str:partner_id>/', cancel_applicant, name='order-cancel-applicant'),
    path('<str:pk>/cancel/', cancel_order, name='order-cancel'),
]
