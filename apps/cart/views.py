from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.common.response import no_content_response, success_response

from . import services
from .serializers import CartItemCreateSerializer, CartItemSerializer, CartItemUpdateSerializer, CartSerializer


class CartAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        cart = services.get_cart(request.user)
        return success_response(CartSerializer(cart).data)


class CartItemCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = CartItemCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = services.add_item(request.user, **serializer.validated_data)
        return success_response(
            CartItemSerializer(item).data,
            message="Added to cart.",
            status_code=status.HTTP_201_CREATED,
        )


class CartItemUpdateDeleteAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, item_id: int, *args, **kwargs):
        serializer = CartItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = services.update_item_quantity(request.user, item_id, serializer.validated_data["quantity"])
        return success_response(CartItemSerializer(item).data, message="Quantity updated.")

    def patch(self, request, item_id: int, *args, **kwargs):
        return self.put(request, item_id, *args, **kwargs)

    def delete(self, request, item_id: int, *args, **kwargs):
        services.remove_item(request.user, item_id)
        return no_content_response()
