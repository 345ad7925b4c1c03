from __future__ import annotations

from rest_framework import serializers

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    order_id = serializers.IntegerField(read_only=True, allow_null=True)
    order_status = serializers.CharField(source="order.status", read_only=True, default=None)
    verified_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Payment
        fields = (
            "id",
            "order_id",
            "order_status",
            "method",
            "payment_reference",
            "status",
            "payment_date",
            "verified_by_id",
            "verified_at",
        )


class PaymentCreateSerializer(serializers.Serializer):
    order_id = serializers.IntegerField(min_value=1)
    method = serializers.CharField(max_length=50)
    payment_reference = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class PaymentUpdateSerializer(serializers.Serializer):
    method = serializers.CharField(max_length=50, required=False)
    payment_reference = serializers.CharField(max_length=255, required=False, allow_blank=True)


class PaymentVerifySerializer(serializers.Serializer):
    # Blank values are rejected by the settlement service with its own message.
    status = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
