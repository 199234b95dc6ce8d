"""Ledger service - balance store and transaction log.

Every balance change goes through post(): one signed delta, one validation
policy, one atomic block that locks the balance row, writes the new balance
and appends the log entry. Both commit or neither does.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from django.db import transaction
from django.db.models import Sum

from ginger.conf import ginger_settings
from ginger.exceptions import ValidationError
from ginger.gates import Gates
from ginger.models import PointsBalance, PointTransaction, Reward, TransactionKind
from ginger.protocols import Actor
from ginger.retry import retry_on_transient
from ginger.services import customers
from ginger.signals import points_posted

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceDiscrepancy:
    """Stored balance that no longer matches the sum of its log."""

    customer_id: int
    stored: int
    logged: int

    @property
    def difference(self) -> int:
        return self.stored - self.logged


# ======================================================================
# Balance store
# ======================================================================


def get_or_create_balance(customer) -> PointsBalance:
    """Get the customer's balance row, creating it with 0 points."""
    balance, created = PointsBalance.objects.get_or_create(customer=customer)
    if created:
        logger.debug("Created points balance for customer %s", customer.pk)
    return balance


def apply_delta(
    customer,
    delta: int,
    guard: Callable[[PointsBalance], None] | None = None,
) -> PointsBalance:
    """
    Apply a signed delta to the customer's balance.

    MUST be called inside transaction.atomic(). The balance row is locked
    with select_for_update(), so concurrent changes for the same customer
    are serialized while different customers proceed independently.

    Args:
        customer: Customer (user instance)
        delta: Signed points change
        guard: Extra check run once the row is locked (may raise)

    Raises:
        ConflictError: If a debit exceeds the available balance
    """
    get_or_create_balance(customer)
    balance = PointsBalance.objects.select_for_update().get(customer=customer)

    if guard is not None:
        guard(balance)
    Gates.sufficient_balance(balance.current_points, delta)

    balance.current_points += delta
    balance.save(update_fields=["current_points", "last_updated"])
    return balance


# ======================================================================
# Transaction log
# ======================================================================


def append(
    customer,
    actor_id: int | None,
    delta: int,
    description: str,
    kind: str,
    balance_after: int,
    reward: Reward | None = None,
) -> PointTransaction:
    """Append one immutable entry to the log."""
    return PointTransaction.objects.create(
        customer=customer,
        actor_id=actor_id,
        kind=kind,
        points_delta=delta,
        balance_after=balance_after,
        description=description,
        reward=reward,
    )


@retry_on_transient
def _post_atomic(customer, actor_id, delta, description, kind, reward, guard):
    with transaction.atomic():
        balance = apply_delta(customer, delta, guard=guard)
        return append(
            customer,
            actor_id,
            delta,
            description,
            kind,
            balance_after=balance.current_points,
            reward=reward,
        )


def post(
    customer,
    actor: Actor | None,
    delta: int,
    description: str,
    kind: str = TransactionKind.ADJUST,
    reward: Reward | None = None,
    guard: Callable[[PointsBalance], None] | None = None,
) -> PointTransaction:
    """
    Credit or debit a customer's balance.

    Args:
        customer: Customer (user instance)
        actor: Who triggered the change (None for system entries)
        delta: Signed, non-zero integer
        description: Reason shown in the history
        kind: TransactionKind
        reward: Redeemed reward (debits only)
        guard: Extra check run under the row lock

    Returns:
        Created PointTransaction (balance_after = new balance)

    Raises:
        ValidationError: If delta is not a non-zero integer or description is empty
        ConflictError: If a debit exceeds the available balance
        TransientStoreError: If the store kept failing after all retries
    """
    Gates.points_delta(delta)
    if not description or not description.strip():
        raise ValidationError("MISSING_FIELD", message="description is required")

    actor_id = actor.id if actor else None
    tx = _post_atomic(customer, actor_id, delta, description.strip(), kind, reward, guard)

    logger.info(
        "Posted %+d points to customer %s by %s (%s), balance now %s",
        delta,
        customer.pk,
        actor_id or "system",
        kind,
        tx.balance_after,
    )
    points_posted.send(sender=PointTransaction, transaction=tx)
    return tx


def list_for(customer, limit: int | None = None) -> list[PointTransaction]:
    """Get transaction history for a customer, newest first."""
    limit = _clamp_limit(limit, ginger_settings.TRANSACTION_HISTORY_LIMIT)
    return list(
        PointTransaction.objects.filter(customer=customer)
        .select_related("actor", "reward")[:limit]
    )


def recent(limit: int | None = None) -> list[PointTransaction]:
    """Get recent transactions across all customers (admin feed)."""
    limit = _clamp_limit(limit, ginger_settings.ADMIN_RECENT_LIMIT)
    return list(
        PointTransaction.objects.select_related("customer", "actor", "reward")[:limit]
    )


# ======================================================================
# Actor-facing reads
# ======================================================================


def balance_for(customer_id, actor: Actor) -> PointsBalance:
    """Current balance, visible to the customer and to staff."""
    customer_id = customers.coerce_id(customer_id)
    Gates.ownership_or_staff(actor, customer_id)
    return get_or_create_balance(customers.resolve(customer_id))


def history_for(customer_id, actor: Actor, limit: int | None = None) -> list[PointTransaction]:
    """Transaction history, visible to the customer and to staff."""
    customer_id = customers.coerce_id(customer_id)
    Gates.ownership_or_staff(actor, customer_id)
    return list_for(customers.resolve(customer_id), limit)


# ======================================================================
# Audit
# ======================================================================


def audit() -> list[BalanceDiscrepancy]:
    """
    Recompute every balance from the log and report mismatches.

    Read-only: the ledger never rewrites balances outside post().
    """
    logged = dict(
        PointTransaction.objects.order_by()
        .values("customer_id")
        .annotate(total=Sum("points_delta"))
        .values_list("customer_id", "total")
    )
    stored = dict(PointsBalance.objects.values_list("customer_id", "current_points"))

    discrepancies = []
    for customer_id in sorted(set(logged) | set(stored)):
        expected = logged.get(customer_id) or 0
        actual = stored.get(customer_id, 0)
        if expected != actual:
            discrepancies.append(BalanceDiscrepancy(customer_id, actual, expected))

    if discrepancies:
        logger.warning("Balance audit found %s discrepancies", len(discrepancies))
    return discrepancies


def _clamp_limit(limit, default: int) -> int:
    if limit is None:
        return default
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError("INVALID_LIMIT", limit=repr(limit))
    return min(limit, ginger_settings.TRANSACTION_HISTORY_MAX_LIMIT)
