"""Admin dashboard aggregates."""

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db.models import Sum
from django.utils import timezone

from ginger.conf import ginger_settings
from ginger.gates import Gates
from ginger.models import PointsBalance
from ginger.protocols import Actor
from ginger.services import customers, ledger


def analytics() -> dict:
    """Customer counts and points currently in circulation."""
    User = get_user_model()
    customer_qs = User.objects.filter(is_staff=False)
    balances = PointsBalance.objects.filter(customer__is_staff=False)
    since = timezone.now() - timedelta(days=ginger_settings.RECENT_REGISTRATION_DAYS)

    return {
        "total_customers": customer_qs.count(),
        "customers_with_points": balances.filter(current_points__gt=0).count(),
        "total_points_distributed": balances.aggregate(total=Sum("current_points"))["total"] or 0,
        "recent_registrations": customer_qs.filter(date_joined__gte=since).count(),
    }


def dashboard(actor: Actor, limit: int = 10) -> dict:
    """Everything the admin dashboard shows in one call."""
    Gates.admin_actor(actor)
    return {
        "staff": customers.staff_members(),
        "analytics": analytics(),
        "recent_transactions": ledger.recent(limit),
    }
