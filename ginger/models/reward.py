"""Reward catalog model."""

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Reward(models.Model):
    """
    Catalog item redeemable for a fixed point cost.

    Managed by staff admins. Never hard-deleted while redemption history
    references it: deactivate with ``is_active=False`` instead. Inactive
    rewards are never offered to customers.
    """

    name = models.CharField(_("name"), max_length=100)
    description = models.CharField(_("description"), max_length=255, blank=True)
    points_required = models.PositiveIntegerField(
        _("points required"),
        validators=[MinValueValidator(1)],
        help_text=_("Points debited when the reward is redeemed"),
    )

    is_active = models.BooleanField(_("active"), default=True, db_index=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "ginger_reward"
        verbose_name = _("reward")
        verbose_name_plural = _("rewards")
        ordering = ["points_required", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points_required__gte=1),
                name="ginger_reward_points_required_gte_1",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.points_required}pts)"
