"""Ginger admin.

Rewards are editable (soft delete only). Balances and transactions are
read-only: they change through the ledger, never by hand.
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from ginger.models import PointsBalance, PointTransaction, QRToken, Reward


# ===========================================
# Reward Admin
# ===========================================


@admin.register(Reward)
class RewardAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "points_required",
        "is_active",
        "redemption_count",
        "updated_at",
    ]
    list_filter = ["is_active"]
    search_fields = ["name", "description"]
    ordering = ["points_required", "name"]
    readonly_fields = ["created_at", "updated_at"]
    actions = ["deactivate"]

    def has_delete_permission(self, request, obj=None):
        return False

    def redemption_count(self, obj):
        return obj.redemptions.count()

    redemption_count.short_description = "Redemptions"

    @admin.action(description="Deactivate selected rewards")
    def deactivate(self, request, queryset):
        from ginger.services import rewards

        count = 0
        for reward in queryset.filter(is_active=True):
            rewards.deactivate_reward(reward.pk)
            count += 1
        self.message_user(request, f"{count} reward(s) deactivated.", messages.SUCCESS)


# ===========================================
# Ledger Admin (read-only)
# ===========================================


@admin.register(PointsBalance)
class PointsBalanceAdmin(admin.ModelAdmin):
    list_display = ["customer", "current_points", "last_updated"]
    search_fields = ["customer__email", "customer__username"]
    readonly_fields = ["customer", "current_points", "last_updated"]
    ordering = ["-current_points"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PointTransaction)
class PointTransactionAdmin(admin.ModelAdmin):
    list_display = [
        "occurred_at",
        "customer",
        "kind",
        "points_display",
        "balance_after",
        "description",
        "actor",
    ]
    list_filter = ["kind"]
    search_fields = ["customer__email", "customer__username", "description"]
    readonly_fields = [
        "customer",
        "actor",
        "kind",
        "points_delta",
        "balance_after",
        "description",
        "reward",
        "occurred_at",
    ]
    date_hierarchy = "occurred_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def points_display(self, obj):
        if obj.points_delta > 0:
            return format_html('<span style="color:green">+{}</span>', obj.points_delta)
        return format_html('<span style="color:red">{}</span>', obj.points_delta)

    points_display.short_description = "Points"


@admin.register(QRToken)
class QRTokenAdmin(admin.ModelAdmin):
    list_display = ["customer", "token_data", "created_at"]
    search_fields = ["customer__email", "token_data"]
    readonly_fields = ["customer", "token_data", "created_at"]

    def has_add_permission(self, request):
        return False
