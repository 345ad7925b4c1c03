from __future__ import annotations

from django.db import models

from apps.common.models import RecordState


class Reward(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    points_required = models.PositiveIntegerField()
    reward_type = models.CharField(max_length=50, blank=True)
    expire_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    item_product = models.ForeignKey(
        "catalog.Product",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="rewards",
    )
    item_ticket = models.ForeignKey(
        "catalog.Ticket",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="rewards",
    )
    state = models.CharField(max_length=10, choices=RecordState.choices, default=RecordState.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["points_required", "id"]

    def __str__(self) -> str:
        return self.name


class Redemption(models.Model):
    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        UNUSED = "Unused", "Unused"
        USED = "Used", "Used"

    user = models.ForeignKey("accounts.User", on_delete=models.CASCADE, related_name="redemptions")
    reward = models.ForeignKey(Reward, on_delete=models.PROTECT, related_name="redemptions")
    points_spent = models.PositiveIntegerField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    # Set while the redemption's discount sits on an order awaiting settlement.
    applied_order = models.ForeignKey(
        "orders.Order",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="applied_redemptions",
    )
    redeemed_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-redeemed_at", "-id"]
        indexes = [
            models.Index(fields=["user", "status"], name="redemption_user_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Redemption<{self.id}:{self.status}>"
