from __future__ import annotations

from rest_framework import serializers

from apps.cart.serializers import CartItemSerializer

from .models import Order


class OrderSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)
    user_id = serializers.IntegerField(read_only=True, allow_null=True)
    payment = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = (
            "id",
            "user_id",
            "status",
            "subtotal_amount",
            "discount_amount",
            "total_amount",
            "order_date",
            "updated_at",
            "items",
            "payment",
        )

    def get_payment(self, obj: Order) -> dict | None:
        payment = getattr(obj, "payment", None)
        if payment is None:
            return None
        return {"id": payment.id, "status": payment.status, "method": payment.method}
