"""Payment submission by order owners and settlement by administrators."""

from __future__ import annotations

import logging
from decimal import ROUND_DOWN

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import APIException

from apps.accounts.models import PointTransaction, User
from apps.catalog.services import decrement_stock, normalize_item_type
from apps.common.exceptions import (
    BusinessRuleError,
    InvalidStateTransition,
    PaymentProcessingError,
    ResourceNotFound,
    UnknownItemType,
)
from apps.orders.models import Order
from apps.rewards.services import finalize_item_redemption, finalize_order_redemptions

from .models import Payment

logger = logging.getLogger(__name__)

SETTLEMENT_STATUSES = (Payment.Status.VALID, Payment.Status.DECLINED)


def list_payments():
    return Payment.objects.select_related("order", "verified_by").order_by("-payment_date", "-id")


def create_payment(user, *, order_id: int, method: str, payment_reference: str = "") -> Payment:
    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id, user=user).first()
        if order is None:
            raise ResourceNotFound("Order not found.")
        if order.status in (Order.Status.DELIVERED, Order.Status.UNDER_REVIEW):
            logger.warning("payment rejected: order=%s status=%s", order.pk, order.status)
            raise InvalidStateTransition("Invalid order state.")

        payment = Payment.objects.select_for_update().filter(order=order).first()
        if payment is not None and payment.status != Payment.Status.DECLINED:
            raise InvalidStateTransition("Invalid order state.")

        if payment is None:
            payment = Payment.objects.create(
                order=order,
                method=method,
                payment_reference=payment_reference,
                status=Payment.Status.PENDING,
            )
        else:
            # An Unpaid order keeps its declined payment row; resubmission reuses it.
            payment.method = method
            payment.payment_reference = payment_reference
            payment.status = Payment.Status.PENDING
            payment.verified_by = None
            payment.verified_at = None
            payment.save()

        order.status = Order.Status.UNDER_REVIEW
        order.save(update_fields=["status", "updated_at"])

    logger.info("payment submitted: payment=%s order=%s method=%s", payment.pk, order.pk, method)
    return payment


def _lock_payment(payment_id: int, **filters) -> tuple[Payment | None, Order | None]:
    """Lock a payment's order row, then the payment row itself.

    Order rows are always locked before Payment rows, as payment
    submission and order deletion do.
    """
    located = Payment.objects.filter(pk=payment_id, **filters).values("order_id").first()
    if located is None:
        return None, None

    order = None
    if located["order_id"] is not None:
        order = Order.objects.select_for_update().filter(pk=located["order_id"]).first()
    payment = Payment.objects.select_for_update().filter(pk=payment_id, **filters).first()
    if payment is None or order is None or payment.order_id != order.pk:
        return payment, None
    return payment, order


def _get_owned_payment(user, payment_id: int) -> tuple[Payment, Order]:
    payment, order = _lock_payment(payment_id, order__user=user)
    if payment is None or order is None:
        raise ResourceNotFound("Payment not found.")
    return payment, order


def update_payment(user, payment_id: int, *, method: str | None = None, payment_reference: str | None = None) -> Payment:
    with transaction.atomic():
        payment, order = _get_owned_payment(user, payment_id)
        if order.is_delivered:
            raise InvalidStateTransition("Payment cannot be edited.")

        if method is not None:
            payment.method = method
        if payment_reference is not None:
            payment.payment_reference = payment_reference
        payment.status = Payment.Status.PENDING
        payment.verified_by = None
        payment.verified_at = None
        payment.save()

        order.status = Order.Status.UNDER_REVIEW
        order.save(update_fields=["status", "updated_at"])
    return payment


def delete_payment(user, payment_id: int) -> None:
    with transaction.atomic():
        payment, order = _get_owned_payment(user, payment_id)
        if order.is_delivered:
            raise InvalidStateTransition("Payment cannot be deleted.")

        order.status = Order.Status.UNPAID
        order.save(update_fields=["status", "updated_at"])
        payment.delete()
    logger.info("payment deleted: payment=%s order=%s", payment_id, order.pk)


def loyalty_points_for(order: Order) -> int:
    return int((order.total_amount * settings.LOYALTY_ACCRUAL_RATE).to_integral_value(rounding=ROUND_DOWN))


def _settle(payment: Payment, order: Order, items, actor) -> None:
    user = User.objects.select_for_update().get(pk=order.user_id)
    points = loyalty_points_for(order)
    if points > 0:
        user.add_loyalty_points(points)
        user.save(update_fields=["loyalty_points", "updated_at"])
        PointTransaction.objects.create(
            user=user,
            order=order,
            tx_type=PointTransaction.TxType.EARN,
            amount=points,
            balance_after=user.loyalty_points,
            description=f"Order {order.pk} settled",
        )

    for item in items:
        if not normalize_item_type(item.item_type):
            raise UnknownItemType("Order item type is missing.")
        finalize_item_redemption(order, item.item_type, item.item_id)
        decrement_stock(item.item_type, item.item_id, item.quantity)
    finalize_order_redemptions(order)

    order.status = Order.Status.DELIVERED
    order.save(update_fields=["status", "updated_at"])

    payment.status = Payment.Status.VALID
    payment.verified_by = actor
    payment.verified_at = timezone.now()
    payment.save(update_fields=["status", "verified_by", "verified_at", "updated_at"])
    logger.info("payment settled: payment=%s order=%s points=%s", payment.pk, order.pk, points)


def _decline(payment: Payment, order: Order, actor) -> None:
    payment.status = Payment.Status.DECLINED
    payment.verified_by = actor
    payment.verified_at = timezone.now()
    payment.save(update_fields=["status", "verified_by", "verified_at", "updated_at"])

    order.status = Order.Status.UNPAID
    order.save(update_fields=["status", "updated_at"])
    logger.info("payment declined: payment=%s order=%s", payment.pk, order.pk)


def verify_payment(payment_id: int, status: str | None, actor=None) -> Payment:
    """Settle (`Valid`) or reject (`Declined`) a pending payment.

    Everything happens in one transaction: inventory, loyalty points,
    redemptions and both status changes commit together or not at all.
    Business rule violations propagate unchanged; anything else is logged
    and re-raised as PaymentProcessingError.
    """
    raw_status = str(status or "").strip()
    if not raw_status:
        raise BusinessRuleError("Status is required.")

    try:
        with transaction.atomic():
            payment, order = _lock_payment(payment_id)
            if payment is None:
                raise ResourceNotFound("Payment not found.")
            if order is None:
                raise BusinessRuleError("Payment has no associated order.")
            if order.user_id is None:
                raise BusinessRuleError("Order has no associated user.")

            items = list(order.items.order_by("id"))
            if not items:
                raise BusinessRuleError("Order has no items.")

            if raw_status not in SETTLEMENT_STATUSES:
                raise BusinessRuleError("Invalid status.")
            if payment.status != Payment.Status.PENDING:
                raise InvalidStateTransition("Payment is not pending verification.")

            if raw_status == Payment.Status.VALID:
                _settle(payment, order, items, actor)
            else:
                _decline(payment, order, actor)
    except APIException as exc:
        logger.warning("payment verification rejected: payment=%s reason=%s", payment_id, exc.detail)
        raise
    except Exception as exc:
        logger.exception("payment verification failed: payment=%s", payment_id)
        raise PaymentProcessingError(f"Failed to update payment {payment_id}.") from exc
    return payment
