from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import AuditLog, PointTransaction, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    model = User
    list_display = ("id", "email", "name", "role", "loyalty_points", "is_active", "created_at")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("email", "name", "phone")
    ordering = ("-created_at",)
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Personal info", {"fields": ("username", "name", "phone")}),
        ("Loyalty", {"fields": ("loyalty_points",)}),
        (
            "Permissions",
            {
                "fields": (
                    "role",
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                )
            },
        ),
        ("Important dates", {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "password1", "password2", "role")}),
    )
    readonly_fields = ("created_at", "updated_at", "date_joined", "last_login")


@admin.register(PointTransaction)
class PointTransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "tx_type", "amount", "balance_after", "order", "created_at")
    search_fields = ("user__email", "description")
    list_filter = ("tx_type",)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("id", "occurred_at", "actor", "actor_role", "action", "target_type", "target_id", "result")
    search_fields = ("action", "target_type", "target_id", "actor__email", "request_id")
    list_filter = ("result", "action", "actor_role")
    readonly_fields = (
        "occurred_at",
        "actor",
        "actor_role",
        "action",
        "target_type",
        "target_id",
        "request_id",
        "ip",
        "user_agent",
        "before_json",
        "after_json",
        "metadata_json",
        "result",
        "error_code",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
