from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.accounts.admin_security import RolePermission, RoleRBACPermission, log_audit_event
from apps.accounts.models import AuditLog
from apps.common.exceptions import BusinessRuleError, PaymentProcessingError
from apps.common.pagination import StandardResultsSetPagination
from apps.common.response import no_content_response, success_response

from . import services
from .models import Payment
from .serializers import (
    PaymentCreateSerializer,
    PaymentSerializer,
    PaymentUpdateSerializer,
    PaymentVerifySerializer,
)


class PaymentListCreateAPIView(APIView):
    required_permissions = {"GET": {RolePermission.PAYMENT_VIEW}}

    def get_permissions(self):
        if self.request.method == "GET":
            return [RoleRBACPermission()]
        return [IsAuthenticated()]

    def get(self, request, *args, **kwargs):
        queryset = services.list_payments()
        status_filter = request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(PaymentSerializer(page, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = services.create_payment(request.user, **serializer.validated_data)
        return success_response(PaymentSerializer(payment).data, message="Payment submitted for review.")


class PaymentDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, payment_id: int, *args, **kwargs):
        serializer = PaymentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = services.update_payment(request.user, payment_id, **serializer.validated_data)
        return success_response(PaymentSerializer(payment).data, message="Payment updated.")

    def delete(self, request, payment_id: int, *args, **kwargs):
        services.delete_payment(request.user, payment_id)
        return no_content_response()


class AdminPaymentVerifyAPIView(APIView):
    permission_classes = [RoleRBACPermission]
    required_permissions = {"PUT": {RolePermission.PAYMENT_VERIFY}}

    def put(self, request, payment_id: int, *args, **kwargs):
        serializer = PaymentVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        requested_status = serializer.validated_data.get("status") or ""

        before = Payment.objects.filter(pk=payment_id).values("status", "order__status").first() or {}
        try:
            payment = services.verify_payment(payment_id, requested_status, actor=request.user)
        except (BusinessRuleError, PaymentProcessingError) as exc:
            log_audit_event(
                request,
                action="PAYMENT_VERIFY",
                target_type="Payment",
                target_id=str(payment_id),
                before=before,
                metadata={"requested_status": requested_status},
                result=AuditLog.Result.FAIL,
                error_code=exc.default_code,
            )
            raise

        payment.refresh_from_db()
        log_audit_event(
            request,
            action="PAYMENT_VERIFY",
            target_type="Payment",
            target_id=str(payment.pk),
            before=before,
            after={"status": payment.status, "order__status": payment.order.status if payment.order else None},
            metadata={"requested_status": requested_status},
        )
        return success_response(PaymentSerializer(payment).data, message=f"Payment marked {payment.status}.")
