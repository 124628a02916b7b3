from django.urls import path
from .views import (
    create_top_up,
    create_withdraw,
    create_job_payment,
    payment_webhook,
    UserTransactionListView,
)

urlpatterns = [
    path('topup/', create_top_up, name='payment-topup'),
    path('withdraw/', create_withdraw, name='payment-withdraw'),
    path('paid/', create_job_payment, name='payment-job'),
    path('webhook/', payment_webhook, name='payment-webhook'),
    path('user/<str:user_id>/', UserTransactionListView.as_view(), name='payment-user-transactions'),
]
