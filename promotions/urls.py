from django.urls import path
from .views import (
    PromotionListCreateView,
    delete_promotion,
    client_promotions,
    apply_promotion,
)

urlpatterns = [
    path('', PromotionListCreateView.as_view(), name='promotion-list-create'),
    path('apply/', apply_promotion, name='promotion-apply'),
    path('client/<str:client_id>/', client_promotions, name='promotion-client-list'),
    path('<str:pk>/', delete_promotion, name='promotion-delete'),
]
