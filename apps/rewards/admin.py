from django.contrib import admin

from .models import Redemption, Reward


@admin.register(Reward)
class RewardAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "points_required", "reward_type", "expire_date", "is_active", "state")
    list_filter = ("is_active", "state", "reward_type")
    search_fields = ("name",)


@admin.register(Redemption)
class RedemptionAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "reward", "points_spent", "status", "applied_order", "redeemed_at")
    list_filter = ("status",)
    search_fields = ("user__email", "reward__name")
