from django.contrib import admin

from apps.cart.models import CartItem

from .models import Order


class OrderItemInline(admin.TabularInline):
    model = CartItem
    fk_name = "order"
    extra = 0
    readonly_fields = ("item_type", "item_id", "quantity", "unit_price", "state", "added_on")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "status", "subtotal_amount", "discount_amount", "total_amount", "order_date")
    list_filter = ("status",)
    search_fields = ("id", "user__email")
    readonly_fields = ("subtotal_amount", "discount_amount", "total_amount", "order_date", "updated_at")
    inlines = [OrderItemInline]
