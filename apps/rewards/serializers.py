from __future__ import annotations

from rest_framework import serializers

from .models import Redemption, Reward


class RewardSerializer(serializers.ModelSerializer):
    item_product_id = serializers.IntegerField(read_only=True, allow_null=True)
    item_ticket_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Reward
        fields = (
            "id",
            "name",
            "description",
            "points_required",
            "reward_type",
            "expire_date",
            "item_product_id",
            "item_ticket_id",
        )


class RedemptionSerializer(serializers.ModelSerializer):
    reward = RewardSerializer(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    applied_order_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Redemption
        fields = ("id", "user_id", "reward", "points_spent", "status", "applied_order_id", "redeemed_at")


class RedemptionCreateSerializer(serializers.Serializer):
    reward_id = serializers.IntegerField(min_value=1)
