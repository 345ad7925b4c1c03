from __future__ import annotations

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

from .managers import UserManager


class User(AbstractUser):
    class Role(models.TextChoices):
        ADMIN = "Admin", "Admin"
        ORGANIZER = "Organizer", "Organizer"
        USER = "User", "User"

    username = models.CharField(max_length=150, unique=True, blank=True)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.USER)
    loyalty_points = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    objects = UserManager()

    def __str__(self) -> str:
        return self.email

    def add_loyalty_points(self, points: int) -> None:
        if points > 0:
            self.loyalty_points += points

    def deduct_loyalty_points(self, points: int) -> None:
        if points > 0:
            self.loyalty_points = max(self.loyalty_points - points, 0)


class PointTransaction(models.Model):
    class TxType(models.TextChoices):
        EARN = "EARN", "EARN"
        USE = "USE", "USE"
        ADJUST = "ADJUST", "ADJUST"

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="point_transactions")
    order = models.ForeignKey(
        "orders.Order",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="point_transactions",
    )
    tx_type = models.CharField(max_length=16, choices=TxType.choices, default=TxType.EARN)
    amount = models.IntegerField()
    balance_after = models.IntegerField(default=0)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]


class AuditLog(models.Model):
    class Result(models.TextChoices):
        SUCCESS = "SUCCESS", "SUCCESS"
        FAIL = "FAIL", "FAIL"

    occurred_at = models.DateTimeField(auto_now_add=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="audit_logs",
    )
    actor_role = models.CharField(max_length=16, blank=True)
    action = models.CharField(max_length=120)
    target_type = models.CharField(max_length=80, blank=True)
    target_id = models.CharField(max_length=120, blank=True)
    request_id = models.CharField(max_length=120, blank=True)
    ip = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    before_json = models.JSONField(default=dict, blank=True)
    after_json = models.JSONField(default=dict, blank=True)
    metadata_json = models.JSONField(default=dict, blank=True)
    result = models.CharField(max_length=10, choices=Result.choices, default=Result.SUCCESS)
    error_code = models.CharField(max_length=80, blank=True)

    class Meta:
        ordering = ["-occurred_at", "-id"]
        indexes = [
            models.Index(fields=["action", "occurred_at"], name="auditlog_action_occurred_idx"),
            models.Index(fields=["target_type", "target_id"], name="auditlog_target_idx"),
        ]
