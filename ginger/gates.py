"""
Ginger Gates - Validation rules.

G1: ScanCooldown - Same (customer, staff) pair cannot be scanned twice inside the window
G2: StaffActor - Actor must be a staff member
G3: AdminActor - Actor must be a staff admin
G4: OwnershipOrStaff - Customers only see their own ledger, staff see all
G5: PointsDelta - A balance change is a non-zero integer
G6: SufficientBalance - A debit never drives the balance below zero
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from django.utils import timezone

from ginger.exceptions import (
    AuthorizationError,
    ConflictError,
    CooldownError,
    GingerError,
    ValidationError,
)
from ginger.protocols import Actor


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Ginger validation gates."""

    # =========================================================================
    # G1: Scan Cooldown
    # =========================================================================

    @classmethod
    def scan_cooldown(
        cls,
        customer_id: int,
        staff_id: int,
        seconds: int | None = None,
        now: datetime | None = None,
    ) -> GateResult:
        """
        G1: No transaction for (customer, staff) within the last N seconds.

        Purely a query over the transaction log. Stops accidental double
        taps of the same physical scan, not fraud across staff members.

        Args:
            customer_id: Scanned customer
            staff_id: Staff member scanning
            seconds: Window override (default SCAN_COOLDOWN_SECONDS)
            now: Reference time (default timezone.now())

        Raises:
            CooldownError: If the pair was scanned too recently
        """
        from ginger.conf import ginger_settings
        from ginger.models import PointTransaction

        if seconds is None:
            seconds = ginger_settings.SCAN_COOLDOWN_SECONDS
        now = now or timezone.now()
        window = timedelta(seconds=seconds)

        last = (
            PointTransaction.objects.filter(
                customer_id=customer_id,
                actor_id=staff_id,
                occurred_at__gt=now - window,
            )
            .order_by("-occurred_at")
            .values_list("occurred_at", flat=True)
            .first()
        )
        if last is not None:
            retry_after = max(1, math.ceil((last + window - now).total_seconds()))
            raise CooldownError(
                "SCAN_TOO_RECENT",
                message=f"QR code scanned too recently. Please wait {seconds} seconds.",
                gate="G1_ScanCooldown",
                retry_after=retry_after,
            )

        return GateResult(True, "G1_ScanCooldown")

    @classmethod
    def can_scan(cls, customer_id: int, staff_id: int, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.scan_cooldown(customer_id, staff_id, **kwargs)
            return True
        except CooldownError:
            return False

    # =========================================================================
    # G2: Staff Actor
    # =========================================================================

    @classmethod
    def staff_actor(cls, actor: Actor) -> GateResult:
        """
        G2: Actor must be staff.

        Raises:
            AuthorizationError: If actor is a plain customer
        """
        if not actor.is_staff:
            raise AuthorizationError("STAFF_REQUIRED", gate="G2_StaffActor")
        return GateResult(True, "G2_StaffActor")

    @classmethod
    def check_staff_actor(cls, actor: Actor) -> bool:
        """Check without raising (returns bool)."""
        return cls._passes(cls.staff_actor, actor)

    # =========================================================================
    # G3: Admin Actor
    # =========================================================================

    @classmethod
    def admin_actor(cls, actor: Actor) -> GateResult:
        """
        G3: Actor must be a staff admin.

        Raises:
            AuthorizationError: If actor is not a staff admin
        """
        if not actor.is_admin:
            raise AuthorizationError("ADMIN_REQUIRED", gate="G3_AdminActor")
        return GateResult(True, "G3_AdminActor")

    @classmethod
    def check_admin_actor(cls, actor: Actor) -> bool:
        """Check without raising (returns bool)."""
        return cls._passes(cls.admin_actor, actor)

    # =========================================================================
    # G4: Ownership or Staff
    # =========================================================================

    @classmethod
    def ownership_or_staff(cls, actor: Actor, customer_id: int) -> GateResult:
        """
        G4: Customers only access their own resources; staff access any.

        Raises:
            AuthorizationError: On cross-customer access
        """
        if actor.is_staff or actor.id == customer_id:
            return GateResult(True, "G4_OwnershipOrStaff")
        raise AuthorizationError(
            "OWNERSHIP_REQUIRED",
            gate="G4_OwnershipOrStaff",
        )

    @classmethod
    def check_ownership_or_staff(cls, actor: Actor, customer_id: int) -> bool:
        """Check without raising (returns bool)."""
        return cls._passes(cls.ownership_or_staff, actor, customer_id)

    # =========================================================================
    # G5: Points Delta
    # =========================================================================

    @classmethod
    def points_delta(cls, delta) -> GateResult:
        """
        G5: Single validation policy for every balance change.

        Credits and debits go through the same signed primitive, so the
        only rule is: an integer, and not zero.

        Raises:
            ValidationError: If delta is not a non-zero integer
        """
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValidationError(
                "INVALID_POINTS",
                gate="G5_PointsDelta",
                points=repr(delta),
            )
        return GateResult(True, "G5_PointsDelta")

    @classmethod
    def check_points_delta(cls, delta) -> bool:
        """Check without raising (returns bool)."""
        return cls._passes(cls.points_delta, delta)

    # =========================================================================
    # G6: Sufficient Balance
    # =========================================================================

    @classmethod
    def sufficient_balance(cls, balance: int, delta: int) -> GateResult:
        """
        G6: balance + delta must stay >= 0.

        Over-debits are rejected, never clamped, so the stored balance always
        equals the sum of the logged deltas.

        Raises:
            ConflictError: If the debit exceeds the available balance
        """
        if balance + delta < 0:
            raise ConflictError(
                "INSUFFICIENT_POINTS",
                message=f"Required: {-delta}, Available: {balance}",
                gate="G6_SufficientBalance",
                available=balance,
                requested=-delta,
            )
        return GateResult(True, "G6_SufficientBalance")

    @classmethod
    def check_sufficient_balance(cls, balance: int, delta: int) -> bool:
        """Check without raising (returns bool)."""
        return cls._passes(cls.sufficient_balance, balance, delta)

    @staticmethod
    def _passes(gate, *args) -> bool:
        try:
            gate(*args)
            return True
        except GingerError:
            return False
