from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.common.response import no_content_response, success_response

from . import services
from .serializers import OrderSerializer


class CheckoutAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        order = services.checkout_cart(request.user)
        order = services.get_order(request.user, order.pk)
        return success_response(OrderSerializer(order).data, message="Order created.")


class OrderListAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        queryset = services.list_orders(request.user).order_by("-order_date", "-id")
        return success_response(OrderSerializer(queryset, many=True).data)


class OrderDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id: int, *args, **kwargs):
        order = services.get_order(request.user, order_id)
        return success_response(OrderSerializer(order).data)

    def delete(self, request, order_id: int, *args, **kwargs):
        services.delete_order(request.user, order_id)
        return no_content_response()
