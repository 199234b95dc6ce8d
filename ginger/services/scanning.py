"""Scan and redemption flow.

States of one scan event:

    SCANNED -> COOLDOWN_CHECK -> BLOCKED
                              -> ELIGIBILITY_CHECK -> CREDIT_APPLIED
                                                   -> REDEMPTION_OFFERED

    REDEMPTION_CONFIRMED -> DEBIT_APPLIED   (separate staff action)

INVALID_CODE and BLOCKED are raised as ValidationError and CooldownError,
with the outcome in ``error.data["outcome"]``. Offering a reward never
touches the balance; only redeem() debits.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from ginger.conf import ginger_settings
from ginger.exceptions import ConflictError, CooldownError, ValidationError
from ginger.gates import Gates
from ginger.models import PointTransaction, Reward, TransactionKind
from ginger.protocols import Actor, display_name
from ginger.services import customers, ledger, qr, rewards
from ginger.signals import reward_redeemed

logger = logging.getLogger(__name__)


class ScanOutcome(str, Enum):
    SCANNED = "scanned"
    INVALID_CODE = "invalid_code"
    BLOCKED = "blocked"
    CREDIT_APPLIED = "credit_applied"
    REDEMPTION_OFFERED = "redemption_offered"
    DEBIT_APPLIED = "debit_applied"


@dataclass
class ScanResult:
    """Result of a scan, check or redemption."""

    outcome: ScanOutcome
    customer_id: int
    customer_name: str
    current_points: int
    message: str = ""
    transaction: PointTransaction | None = None
    rewards: list[Reward] = field(default_factory=list)
    reward: Reward | None = None
    can_scan: bool | None = None

    @property
    def reward_eligible(self) -> bool:
        return bool(self.rewards)

    @property
    def multiple_rewards(self) -> bool:
        return len(self.rewards) > 1

    @property
    def suggested_reward(self) -> Reward | None:
        return self.rewards[0] if self.rewards else None


def scan(token, actor: Actor) -> ScanResult:
    """
    Process a staff scan of a customer's QR code.

    Returns:
        ScanResult with outcome CREDIT_APPLIED or REDEMPTION_OFFERED

    Raises:
        AuthorizationError: If actor is not staff
        ValidationError: If the QR code is malformed (INVALID_CODE)
        NotFoundError: If the customer does not exist or is staff
        CooldownError: If the pair was scanned too recently (BLOCKED)
    """
    Gates.staff_actor(actor)
    customer = _resolve_token(token)
    name = display_name(customer)

    _cooldown(customer.pk, actor.id)

    balance = ledger.get_or_create_balance(customer).current_points
    eligible = rewards.available_rewards(balance)

    if eligible:
        logger.info(
            "Customer %s (%s points) eligible for %s reward(s)",
            customer.pk,
            balance,
            len(eligible),
        )
        if len(eligible) == 1:
            message = f"{name} has {balance} points and is eligible for {eligible[0].name}!"
        else:
            message = f"{name} has {balance} points and can choose from {len(eligible)} rewards!"
        return ScanResult(
            outcome=ScanOutcome.REDEMPTION_OFFERED,
            customer_id=customer.pk,
            customer_name=name,
            current_points=balance,
            message=message,
            rewards=eligible,
        )

    points = ginger_settings.SCAN_CREDIT_POINTS
    tx = ledger.post(
        customer,
        actor,
        points,
        "QR code scan",
        kind=TransactionKind.SCAN,
        # Re-checked under the row lock: concurrent scans of one customer serialize there.
        guard=lambda _balance: _cooldown(customer.pk, actor.id),
    )
    return ScanResult(
        outcome=ScanOutcome.CREDIT_APPLIED,
        customer_id=customer.pk,
        customer_name=name,
        current_points=tx.balance_after,
        message=f"Added {points} point{'s' if points != 1 else ''} to {name}",
        transaction=tx,
    )


def check_scan(token, actor: Actor) -> ScanResult:
    """Validate a QR code and report whether it can be scanned now. No side effects."""
    Gates.staff_actor(actor)
    customer = _resolve_token(token)
    can_scan = Gates.can_scan(customer.pk, actor.id)
    balance = ledger.get_or_create_balance(customer).current_points
    return ScanResult(
        outcome=ScanOutcome.SCANNED if can_scan else ScanOutcome.BLOCKED,
        customer_id=customer.pk,
        customer_name=display_name(customer),
        current_points=balance,
        message="QR code is valid" if can_scan else "QR code scanned too recently",
        can_scan=can_scan,
    )


def redeem(customer_id, reward_id, actor: Actor) -> ScanResult:
    """
    Confirm redemption of a specific reward.

    The balance is re-checked under the row lock: it may have dropped since
    the reward was offered.

    Raises:
        AuthorizationError: If actor is not staff
        NotFoundError: If customer or active reward is unknown
        ConflictError: If the balance no longer covers the reward
    """
    Gates.staff_actor(actor)
    customer = customers.resolve(customer_id)
    reward = rewards.get_active(reward_id)

    tx = ledger.post(
        customer,
        actor,
        -reward.points_required,
        f"{reward.name} reward redeemed",
        kind=TransactionKind.REDEEM,
        reward=reward,
    )
    reward_redeemed.send(sender=Reward, reward=reward, transaction=tx)

    return ScanResult(
        outcome=ScanOutcome.DEBIT_APPLIED,
        customer_id=customer.pk,
        customer_name=display_name(customer),
        current_points=tx.balance_after,
        message=f"{reward.name} reward redeemed successfully!",
        transaction=tx,
        reward=reward,
    )


def redeem_best(customer_id, actor: Actor) -> ScanResult:
    """Redeem the cheapest reward the customer can currently afford."""
    Gates.staff_actor(actor)
    customer = customers.resolve(customer_id)
    balance = ledger.get_or_create_balance(customer).current_points
    reward = rewards.single_best_reward(balance)
    if reward is None:
        raise ConflictError("NO_ELIGIBLE_REWARD", available=balance)
    return redeem(customer.pk, reward.pk, actor)


def adjust(customer_id, delta, description: str, actor: Actor) -> PointTransaction:
    """Manual staff adjustment through the same signed primitive."""
    Gates.staff_actor(actor)
    customer = customers.resolve(customer_id)
    return ledger.post(
        customer,
        actor,
        delta,
        description or "Manual adjustment",
        kind=TransactionKind.ADJUST,
    )


def _cooldown(customer_id: int, staff_id: int) -> None:
    try:
        Gates.scan_cooldown(customer_id, staff_id)
    except CooldownError as exc:
        exc.data["outcome"] = ScanOutcome.BLOCKED.value
        logger.info("Scan of customer %s by staff %s blocked (cooldown)", customer_id, staff_id)
        raise


def _resolve_token(token):
    try:
        return qr.resolve(token)
    except ValidationError as exc:
        exc.data["outcome"] = ScanOutcome.INVALID_CODE.value
        raise
