from __future__ import annotations

from django.db import transaction
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common.response import success_response

from .models import PointTransaction
from .serializers import (
    LoginSerializer,
    PointTransactionSerializer,
    SignupSerializer,
    TokenRefreshRequestSerializer,
    UserMeSerializer,
)


def issue_tokens_for_user(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


class SignupAPIView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        # The user's cart is created by the post_save receiver in the same transaction.
        with transaction.atomic():
            user = serializer.save()

        return success_response(
            {
                "user": UserMeSerializer(user).data,
                "tokens": issue_tokens_for_user(user),
            },
            message="Signup completed.",
            status_code=status.HTTP_201_CREATED,
        )


class LoginAPIView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        return success_response(
            {
                "user": UserMeSerializer(user).data,
                "tokens": issue_tokens_for_user(user),
            },
            message="Logged in.",
        )


class RefreshAPIView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        request_serializer = TokenRefreshRequestSerializer(data=request.data)
        request_serializer.is_valid(raise_exception=True)
        serializer = TokenRefreshSerializer(data=request_serializer.validated_data)
        serializer.is_valid(raise_exception=True)
        return success_response(serializer.validated_data, message="Token refreshed.")


class MeAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return success_response(UserMeSerializer(request.user).data)


class PointHistoryAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        rows = PointTransaction.objects.filter(user=request.user).order_by("-created_at", "-id")
        return success_response(
            {
                "balance": request.user.loyalty_points,
                "transactions": PointTransactionSerializer(rows, many=True).data,
            }
        )
