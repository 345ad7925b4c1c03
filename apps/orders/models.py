from __future__ import annotations

from decimal import Decimal

from django.db import models


class Order(models.Model):
    class Status(models.TextChoices):
        UNPAID = "Unpaid", "Unpaid"
        UNDER_REVIEW = "UnderReview", "UnderReview"
        DELIVERED = "Delivered", "Delivered"

    user = models.ForeignKey("accounts.User", null=True, blank=True, on_delete=models.SET_NULL, related_name="orders")
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.UNPAID)
    subtotal_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    order_date = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-order_date", "-id"]

    def __str__(self) -> str:
        return f"Order {self.pk} ({self.status})"

    @property
    def is_delivered(self) -> bool:
        return self.status == self.Status.DELIVERED
