from __future__ import annotations

from rest_framework import serializers

from apps.common.models import RecordState

from .models import Event, Product, Ticket


class TicketSerializer(serializers.ModelSerializer):
    event_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Ticket
        fields = (
            "id",
            "event_id",
            "ticket_type",
            "price",
            "quantity_available",
            "quantity_sold",
            "limit_per_user",
            "points_earned_per_unit",
        )


class EventListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Event
        fields = ("id", "title", "venue", "starts_at")


class EventDetailSerializer(serializers.ModelSerializer):
    tickets = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = ("id", "title", "description", "venue", "starts_at", "tickets")

    def get_tickets(self, obj: Event) -> list[dict]:
        rows = [ticket for ticket in obj.tickets.all() if ticket.state == RecordState.ACTIVE]
        return TicketSerializer(rows, many=True).data


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = (
            "id",
            "name",
            "description",
            "price",
            "stock_quantity",
            "quantity_sold",
            "limit_per_user",
            "points_earned_per_unit",
        )
