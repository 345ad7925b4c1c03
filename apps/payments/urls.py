from django.urls import path

from .views import AdminPaymentVerifyAPIView, PaymentDetailAPIView, PaymentListCreateAPIView

urlpatterns = [
    path("payments", PaymentListCreateAPIView.as_view(), name="payments"),
    path("payments/<int:payment_id>", PaymentDetailAPIView.as_view(), name="payment-detail"),
    path("payments/admin/<int:payment_id>", AdminPaymentVerifyAPIView.as_view(), name="payment-admin-verify"),
]
