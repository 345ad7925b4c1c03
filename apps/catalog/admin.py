from django.contrib import admin

from .models import Event, Product, Ticket


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    readonly_fields = ("quantity_sold", "version")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "venue", "starts_at", "state")
    list_filter = ("state",)
    search_fields = ("title", "venue")
    inlines = [TicketInline]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ("id", "event", "ticket_type", "price", "quantity_available", "quantity_sold", "state")
    list_filter = ("state",)
    search_fields = ("ticket_type", "event__title")
    readonly_fields = ("quantity_sold", "version")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price", "stock_quantity", "quantity_sold", "state", "updated_at")
    list_filter = ("state",)
    search_fields = ("name",)
    readonly_fields = ("quantity_sold", "version")
