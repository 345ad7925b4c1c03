"""Catalog lookups and stock movements shared by the cart and settlement flows."""

from __future__ import annotations

from django.db.models import F
from django.utils import timezone

from apps.common.exceptions import InsufficientInventory, ResourceNotFound, UnknownItemType
from apps.common.models import RecordState

from .models import Product, Ticket

ITEM_TYPE_TICKET = "ticket"
ITEM_TYPE_PRODUCT = "product"


def normalize_item_type(raw) -> str:
    return str(raw or "").strip().lower()


def get_active_item(item_type: str, item_id: int) -> Ticket | Product:
    """Resolve an ACTIVE ticket or product for the given (already normalized) tag."""
    if item_type == ITEM_TYPE_TICKET:
        ticket = Ticket.objects.filter(pk=item_id, state=RecordState.ACTIVE).first()
        if ticket is None:
            raise ResourceNotFound(f"Ticket {item_id} not found.")
        return ticket
    if item_type == ITEM_TYPE_PRODUCT:
        product = Product.objects.filter(pk=item_id, state=RecordState.ACTIVE).first()
        if product is None:
            raise ResourceNotFound(f"Product {item_id} not found.")
        return product
    raise UnknownItemType(f"Unknown item type: {item_type}")


def available_quantity(item: Ticket | Product) -> int:
    if isinstance(item, Ticket):
        return item.quantity_available
    return item.stock_quantity


def decrement_ticket_stock(ticket_id: int, quantity: int) -> None:
    """Guarded decrement: the row only changes if enough stock remains."""
    if not Ticket.objects.filter(pk=ticket_id).exists():
        raise ResourceNotFound(f"Ticket {ticket_id} not found.")
    updated = Ticket.objects.filter(pk=ticket_id, quantity_available__gte=quantity).update(
        quantity_available=F("quantity_available") - quantity,
        quantity_sold=F("quantity_sold") + quantity,
        version=F("version") + 1,
        updated_at=timezone.now(),
    )
    if not updated:
        raise InsufficientInventory("Ticket inventory insufficient.")


def decrement_product_stock(product_id: int, quantity: int) -> None:
    if not Product.objects.filter(pk=product_id).exists():
        raise ResourceNotFound(f"Product {product_id} not found.")
    updated = Product.objects.filter(pk=product_id, stock_quantity__gte=quantity).update(
        stock_quantity=F("stock_quantity") - quantity,
        quantity_sold=F("quantity_sold") + quantity,
        version=F("version") + 1,
        updated_at=timezone.now(),
    )
    if not updated:
        raise InsufficientInventory("Product inventory insufficient.")


def decrement_stock(item_type, item_id: int, quantity: int) -> None:
    tag = normalize_item_type(item_type)
    if tag == ITEM_TYPE_TICKET:
        decrement_ticket_stock(item_id, quantity)
    elif tag == ITEM_TYPE_PRODUCT:
        decrement_product_stock(item_id, quantity)
    else:
        raise UnknownItemType(f"Unknown item type: {tag}")
