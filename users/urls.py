from django.urls import path
from .views import ManageUserView, ManagePartnerProfileView, register_device

urlpatterns = [
    path('me/', ManageUserView.as_view(), name='me'),
    path('partners/me/', ManagePartnerProfileView.as_view(), name='partner-profile'),
    path('devices/', register_device, name='device-register'),
]
