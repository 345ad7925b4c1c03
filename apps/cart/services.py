from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction

from apps.catalog.services import (
    ITEM_TYPE_TICKET,
    available_quantity,
    get_active_item,
    normalize_item_type,
)
from apps.common.exceptions import BusinessRuleError, InsufficientInventory, ResourceNotFound, UnknownItemType
from apps.common.models import RecordState

from .models import Cart, CartItem

logger = logging.getLogger(__name__)


def get_cart(user) -> Cart:
    cart, _ = Cart.objects.get_or_create(user=user)
    return cart


def cart_subtotal(cart: Cart) -> Decimal:
    return sum((item.line_total for item in cart.active_items()), Decimal("0.00"))


def _validate_quantity(item, item_type: str, quantity: int) -> None:
    if quantity < 1:
        raise BusinessRuleError("Quantity must be at least 1.")
    if quantity > settings.MAX_CART_ITEM_QUANTITY:
        raise BusinessRuleError(f"Quantity cannot exceed {settings.MAX_CART_ITEM_QUANTITY}.")
    if item.limit_per_user and quantity > item.limit_per_user:
        raise BusinessRuleError(f"Quantity exceeds the limit of {item.limit_per_user} per user.")
    if quantity > available_quantity(item):
        label = "Ticket" if item_type == ITEM_TYPE_TICKET else "Product"
        raise InsufficientInventory(f"{label} inventory insufficient.")


def add_item(user, *, item_type: str, item_id: int, quantity: int) -> CartItem:
    tag = normalize_item_type(item_type)
    if tag not in CartItem.ItemType.values:
        raise UnknownItemType(f"Unknown item type: {tag}")

    with transaction.atomic():
        cart = Cart.objects.select_for_update().filter(user=user).first() or Cart.objects.create(user=user)
        catalog_item = get_active_item(tag, item_id)

        existing = cart.items.filter(item_type=tag, item_id=item_id, state=RecordState.ACTIVE).first()
        if existing:
            new_quantity = existing.quantity + quantity
            _validate_quantity(catalog_item, tag, new_quantity)
            existing.quantity = new_quantity
            existing.save(update_fields=["quantity", "updated_at"])
            return existing

        _validate_quantity(catalog_item, tag, quantity)
        item = CartItem.objects.create(
            cart=cart,
            item_type=tag,
            item_id=item_id,
            quantity=quantity,
            unit_price=catalog_item.price,
        )
    logger.info("cart item added: user=%s item=%s:%s qty=%s", user.pk, tag, item_id, quantity)
    return item


def _get_owned_item(user, item_id: int) -> CartItem:
    item = (
        CartItem.objects.select_for_update()
        .filter(pk=item_id, cart__user=user, state=RecordState.ACTIVE)
        .first()
    )
    if item is None:
        raise ResourceNotFound("Cart item not found.")
    return item


def update_item_quantity(user, item_id: int, quantity: int) -> CartItem:
    with transaction.atomic():
        item = _get_owned_item(user, item_id)
        catalog_item = get_active_item(item.item_type, item.item_id)
        _validate_quantity(catalog_item, item.item_type, quantity)
        item.quantity = quantity
        item.save(update_fields=["quantity", "updated_at"])
    return item


def remove_item(user, item_id: int) -> None:
    with transaction.atomic():
        item = _get_owned_item(user, item_id)
        item.state = RecordState.DELETED
        item.save(update_fields=["state", "updated_at"])
