"""Checkout and order lifecycle for the caller's own orders."""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.cart.models import Cart, CartItem
from apps.common.exceptions import BusinessRuleError, InvalidStateTransition, ResourceNotFound
from apps.common.models import RecordState
from apps.payments.models import Payment
from apps.rewards.models import Redemption

from .models import Order

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def checkout_cart(user) -> Order:
    """Move every ACTIVE cart line into a new Unpaid order and price it.

    The newest Pending redemption not yet applied elsewhere becomes the
    order's discount (points * REDEMPTION_POINT_VALUE, capped at the
    subtotal) and moves to Unused until the order settles.
    """
    with transaction.atomic():
        cart = Cart.objects.select_for_update().filter(user=user).first()
        if cart is None:
            raise ResourceNotFound("Cart not found.")

        items = list(cart.items.select_for_update().filter(state=RecordState.ACTIVE).order_by("id"))
        if not items:
            raise BusinessRuleError("Cart is empty.")

        order = Order.objects.create(user=user, status=Order.Status.UNPAID)

        subtotal = Decimal("0.00")
        for item in items:
            subtotal += item.quantity * item.unit_price
        CartItem.objects.filter(pk__in=[item.pk for item in items]).update(
            cart=None,
            order=order,
            updated_at=timezone.now(),
        )

        discount = Decimal("0.00")
        redemption = (
            Redemption.objects.select_for_update()
            .filter(user=user, status=Redemption.Status.PENDING, applied_order__isnull=True)
            .order_by("-redeemed_at", "-id")
            .first()
        )
        if redemption is not None:
            discount = min(Decimal(redemption.points_spent) * settings.REDEMPTION_POINT_VALUE, subtotal)
            redemption.status = Redemption.Status.UNUSED
            redemption.applied_order = order
            redemption.save(update_fields=["status", "applied_order", "updated_at"])

        order.subtotal_amount = subtotal.quantize(CENT)
        order.discount_amount = discount.quantize(CENT)
        order.total_amount = (subtotal - discount).quantize(CENT)
        order.save(update_fields=["subtotal_amount", "discount_amount", "total_amount", "updated_at"])

    logger.info(
        "checkout completed: order=%s user=%s items=%s total=%s discount=%s",
        order.pk,
        user.pk,
        len(items),
        order.total_amount,
        order.discount_amount,
    )
    return order


def list_orders(user):
    return Order.objects.filter(user=user).prefetch_related("items").select_related("payment")


def get_order(user, order_id: int) -> Order:
    order = list_orders(user).filter(pk=order_id).first()
    if order is None:
        raise ResourceNotFound("Order not found.")
    return order


def delete_order(user, order_id: int) -> None:
    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id, user=user).first()
        if order is None:
            raise ResourceNotFound("Order not found.")
        if order.is_delivered:
            logger.warning("order delete rejected: order=%s is delivered", order.pk)
            raise InvalidStateTransition("Delivered orders cannot be deleted.")

        Payment.objects.filter(order=order).delete()
        order.items.all().delete()
        Redemption.objects.filter(applied_order=order).update(
            status=Redemption.Status.PENDING,
            applied_order=None,
            updated_at=timezone.now(),
        )
        order.delete()
    logger.info("order deleted: order=%s user=%s", order_id, user.pk)
