"""Points balance model."""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class PointsBalance(models.Model):
    """
    Current redeemable point total for a customer.

    One row per customer, created lazily on first access. Owned by the
    ledger: only ``ginger.services.ledger.post()`` mutates it, always in the
    same atomic block as the matching PointTransaction.
    """

    customer = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="points_balance",
        verbose_name=_("customer"),
    )
    current_points = models.IntegerField(_("current points"), default=0)
    last_updated = models.DateTimeField(_("last updated"), auto_now=True)

    class Meta:
        db_table = "ginger_points_balance"
        verbose_name = _("points balance")
        verbose_name_plural = _("points balances")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_points__gte=0),
                name="ginger_points_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.customer_id}: {self.current_points}pts"
