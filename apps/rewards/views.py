from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.accounts.admin_security import RolePermission, RoleRBACPermission
from apps.common.response import success_response

from . import services
from .serializers import RedemptionCreateSerializer, RedemptionSerializer, RewardSerializer


class RewardListAPIView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        return success_response(RewardSerializer(services.list_rewards(), many=True).data)


class RedemptionCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = RedemptionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        redemption = services.create_redemption(request.user, serializer.validated_data["reward_id"])
        return success_response(
            RedemptionSerializer(redemption).data,
            message="Reward redeemed.",
            status_code=status.HTTP_201_CREATED,
        )


class MyRedemptionListAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        rows = services.redemptions_for_user(request.user)
        return success_response(RedemptionSerializer(rows, many=True).data)


class ProductRedemptionListAPIView(APIView):
    permission_classes = [RoleRBACPermission]
    required_permissions = {"GET": {RolePermission.REDEMPTION_VIEW}}

    def get(self, request, product_id: int, *args, **kwargs):
        rows = services.redemptions_for_product(product_id)
        return success_response(RedemptionSerializer(rows, many=True).data)


class TicketRedemptionListAPIView(APIView):
    permission_classes = [RoleRBACPermission]
    required_permissions = {"GET": {RolePermission.REDEMPTION_VIEW}}

    def get(self, request, ticket_id: int, *args, **kwargs):
        rows = services.redemptions_for_ticket(ticket_id)
        return success_response(RedemptionSerializer(rows, many=True).data)
