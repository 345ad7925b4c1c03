from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from .models import Cart, CartItem
from .services import cart_subtotal


class CartItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = ("id", "item_type", "item_id", "quantity", "unit_price", "line_total", "added_on")


class CartSerializer(serializers.ModelSerializer):
    items = serializers.SerializerMethodField()
    subtotal = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ("id", "items", "subtotal", "updated_at")

    def get_items(self, obj: Cart) -> list[dict]:
        return CartItemSerializer(obj.active_items(), many=True).data

    def get_subtotal(self, obj: Cart) -> str:
        return f"{cart_subtotal(obj):.2f}"


class CartItemCreateSerializer(serializers.Serializer):
    item_type = serializers.CharField(max_length=16)
    item_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, default=1)

    def validate_quantity(self, value):
        if value > settings.MAX_CART_ITEM_QUANTITY:
            raise serializers.ValidationError(f"Quantity cannot exceed {settings.MAX_CART_ITEM_QUANTITY}.")
        return value


class CartItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
