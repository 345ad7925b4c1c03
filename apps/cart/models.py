from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q

from apps.common.models import RecordState


class Cart(models.Model):
    user = models.OneToOneField("accounts.User", on_delete=models.CASCADE, related_name="cart")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Cart<{self.user_id}>"

    def active_items(self):
        return self.items.filter(state=RecordState.ACTIVE)


class CartItem(models.Model):
    """A line in a cart, later re-parented to the order created at checkout."""

    class ItemType(models.TextChoices):
        TICKET = "ticket", "ticket"
        PRODUCT = "product", "product"

    cart = models.ForeignKey(Cart, null=True, blank=True, on_delete=models.CASCADE, related_name="items")
    order = models.ForeignKey(
        "orders.Order",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="items",
    )
    item_type = models.CharField(max_length=16, choices=ItemType.choices)
    item_id = models.PositiveIntegerField()
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    state = models.CharField(max_length=10, choices=RecordState.choices, default=RecordState.ACTIVE)
    added_on = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["added_on", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(Q(cart__isnull=False) & Q(order__isnull=True))
                | (Q(cart__isnull=True) & Q(order__isnull=False)),
                name="cartitem_cart_xor_order",
            ),
            models.CheckConstraint(condition=Q(quantity__gte=1), name="cartitem_quantity_positive"),
        ]

    def __str__(self) -> str:
        return f"CartItem<{self.id}:{self.item_type}:{self.item_id}>"

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity
