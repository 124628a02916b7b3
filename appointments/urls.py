from django.urls import path
from .views import (
    AppointmentCreateView,
    AppointmentDetailView,
    complete_appointment,
    cancel_appointment,
    partner_appointments,
    client_appointments,
    OrderAppointmentListView,
    create_review,
    partner_reviews,
)

urlpatterns = [
    path('', AppointmentCreateView.as_view(), name='appointment-create'),
    path('partner/<str:partner_id>/', partner_appointments, name='appointment-partner-list'),
    path('partner/<str:partner_id>/reviews/', partner_reviews, name='appointment-partner-reviews'),
    path('client/<str:client_id>/', client_appointments, name='appointment-client-list'),
    path('order/<str:order_id>/', OrderAppointmentListView.as_view(), name='appointment-order-list'),
    path('<str:pk>/', AppointmentDetailView.as_view(), name='appointment-detail'),
    path('<str:pk>/complete/', complete_appointment, name='appointment-complete'),
    path('<str:pk>/cancel/', cancel_appointment, name='appointment-cancel'),
    path('<str:pk>/review/', create_review, name='appointment-review'),
]
