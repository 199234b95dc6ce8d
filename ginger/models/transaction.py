"""Point transaction log."""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class TransactionKind(models.TextChoices):
    SCAN = "scan", _("QR scan")
    ADJUST = "adjust", _("Manual adjustment")
    REDEEM = "redeem", _("Reward redemption")


class AppendOnlyError(Exception):
    """Raised when code tries to mutate or delete a logged transaction."""


class PointTransactionQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise AppendOnlyError("Point transactions are append-only.")

    def delete(self):
        raise AppendOnlyError("Point transactions are append-only.")


class PointTransaction(models.Model):
    """
    Immutable record of one balance change.

    points_delta > 0 for credits, < 0 for debits. ``balance_after`` is the
    stored balance right after this entry was applied, so the running
    balance can be read straight off the log.
    """

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="point_transactions",
        verbose_name=_("customer"),
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("staff member"),
        help_text=_("Who triggered the change (empty for system entries)"),
    )

    kind = models.CharField(_("kind"), max_length=20, choices=TransactionKind.choices)
    points_delta = models.IntegerField(_("points"))
    balance_after = models.IntegerField(_("balance after"))
    description = models.CharField(_("description"), max_length=200)
    reward = models.ForeignKey(
        "ginger.Reward",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="redemptions",
        verbose_name=_("reward"),
    )

    occurred_at = models.DateTimeField(
        _("occurred at"), default=timezone.now, editable=False, db_index=True
    )

    objects = PointTransactionQuerySet.as_manager()

    class Meta:
        db_table = "ginger_point_transaction"
        verbose_name = _("point transaction")
        verbose_name_plural = _("point transactions")
        ordering = ["-occurred_at", "-id"]
        indexes = [
            models.Index(
                fields=["customer", "-occurred_at"],
                name="ginger_poin_custome_5b1d0e_idx",
            ),
            models.Index(
                fields=["customer", "actor", "-occurred_at"],
                name="ginger_poin_custome_8c2f4a_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(points_delta=0),
                name="ginger_point_transaction_non_zero",
            ),
        ]

    def __str__(self):
        sign = "+" if self.points_delta > 0 else ""
        return f"{sign}{self.points_delta}pts - {self.description}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise AppendOnlyError("Point transactions are append-only.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyError("Point transactions are append-only.")
