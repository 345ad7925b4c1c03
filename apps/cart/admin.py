from django.contrib import admin

from .models import Cart, CartItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    fk_name = "cart"
    extra = 0
    readonly_fields = ("item_type", "item_id", "unit_price", "added_on")


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "updated_at")
    search_fields = ("user__email",)
    inlines = [CartItemInline]


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "cart", "order", "item_type", "item_id", "quantity", "unit_price", "state")
    list_filter = ("item_type", "state")
