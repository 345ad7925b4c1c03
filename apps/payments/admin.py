from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "method", "payment_reference", "status", "payment_date", "verified_by", "verified_at")
    list_filter = ("status", "method")
    search_fields = ("payment_reference", "order__id", "order__user__email")
    readonly_fields = ("payment_date", "verified_by", "verified_at", "updated_at")
