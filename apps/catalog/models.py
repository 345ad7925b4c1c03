from __future__ import annotations

from django.db import models

from apps.common.models import RecordState


class Event(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    venue = models.CharField(max_length=255, blank=True)
    starts_at = models.DateTimeField(null=True, blank=True)
    state = models.CharField(max_length=10, choices=RecordState.choices, default=RecordState.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at", "id"]

    def __str__(self) -> str:
        return self.title


class Ticket(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets")
    ticket_type = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity_available = models.PositiveIntegerField(default=0)
    quantity_sold = models.PositiveIntegerField(default=0)
    limit_per_user = models.PositiveIntegerField(null=True, blank=True)
    points_earned_per_unit = models.PositiveIntegerField(default=0)
    # Bumped on every stock change.
    version = models.PositiveIntegerField(default=0)
    state = models.CharField(max_length=10, choices=RecordState.choices, default=RecordState.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["event_id", "price", "id"]

    def __str__(self) -> str:
        return f"{self.event_id}:{self.ticket_type}"


class Product(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    stock_quantity = models.PositiveIntegerField(default=0)
    quantity_sold = models.PositiveIntegerField(default=0)
    limit_per_user = models.PositiveIntegerField(null=True, blank=True)
    points_earned_per_unit = models.PositiveIntegerField(default=0)
    version = models.PositiveIntegerField(default=0)
    state = models.CharField(max_length=10, choices=RecordState.choices, default=RecordState.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return self.name
