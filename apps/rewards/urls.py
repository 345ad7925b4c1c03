from django.urls import path

from .views import (
    MyRedemptionListAPIView,
    ProductRedemptionListAPIView,
    RedemptionCreateAPIView,
    RewardListAPIView,
    TicketRedemptionListAPIView,
)

urlpatterns = [
    path("rewards", RewardListAPIView.as_view(), name="rewards"),
    path("redemptions", RedemptionCreateAPIView.as_view(), name="redemption-create"),
    path("redemptions/me", MyRedemptionListAPIView.as_view(), name="redemptions-me"),
    path("redemptions/product/<int:product_id>", ProductRedemptionListAPIView.as_view(), name="redemptions-product"),
    path("redemptions/ticket/<int:ticket_id>", TicketRedemptionListAPIView.as_view(), name="redemptions-ticket"),
]
