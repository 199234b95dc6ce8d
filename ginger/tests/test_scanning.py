"""
Tests for the scan and redemption flow.

Covers:
- Credit on scan and the per-pair cooldown
- Reward offers that leave the balance untouched
- Confirmed redemption, manual adjustment
- The full counter scenario from 9 points to a free coffee
"""

from unittest.mock import patch

import pytest

from ginger.exceptions import (
    AuthorizationError,
    ConflictError,
    CooldownError,
    NotFoundError,
    ValidationError,
)
from ginger.gates import GateResult, Gates
from ginger.models import PointTransaction, TransactionKind
from ginger.services import ledger, scanning
from ginger.services.scanning import ScanOutcome
from ginger.signals import reward_redeemed


pytestmark = pytest.mark.django_db


def _points(customer) -> int:
    return ledger.get_or_create_balance(customer).current_points


class TestScan:
    def test_credits_one_point(self, customer, staff_actor):
        result = scanning.scan(str(customer.pk), staff_actor)

        assert result.outcome == ScanOutcome.CREDIT_APPLIED
        assert result.current_points == 1
        assert result.message == "Added 1 point to Alice Doe"
        assert result.transaction.kind == TransactionKind.SCAN
        assert result.transaction.actor_id == staff_actor.id
        assert not result.reward_eligible

    def test_credit_amount_from_settings(self, customer, staff_actor, settings):
        settings.GINGER = {"SCAN_CREDIT_POINTS": 2}

        result = scanning.scan(str(customer.pk), staff_actor)

        assert result.current_points == 2
        assert result.message == "Added 2 points to Alice Doe"

    def test_cooldown_blocks_second_scan(self, customer, staff_actor):
        scanning.scan(str(customer.pk), staff_actor)

        with pytest.raises(CooldownError) as exc_info:
            scanning.scan(str(customer.pk), staff_actor)

        assert exc_info.value.data["outcome"] == "blocked"
        assert _points(customer) == 1
        assert PointTransaction.objects.filter(customer=customer).count() == 1

    def test_scan_allowed_after_window(self, customer, staff_actor, clock):
        scanning.scan(str(customer.pk), staff_actor)
        clock.advance(16)

        result = scanning.scan(str(customer.pk), staff_actor)

        assert result.current_points == 2

    def test_cooldown_rechecked_under_lock(self, customer, staff_actor):
        """A scan that slips past the first check is still stopped at the balance row."""
        scanning.scan(str(customer.pk), staff_actor)
        real_gate = Gates.scan_cooldown
        calls = []

        def first_check_passes(customer_id, staff_id, **kwargs):
            calls.append(customer_id)
            if len(calls) == 1:
                return GateResult(True, "G1_ScanCooldown")
            return real_gate(customer_id, staff_id, **kwargs)

        with patch.object(Gates, "scan_cooldown", side_effect=first_check_passes):
            with pytest.raises(CooldownError) as exc_info:
                scanning.scan(str(customer.pk), staff_actor)

        assert len(calls) == 2
        assert exc_info.value.data["outcome"] == "blocked"
        assert _points(customer) == 1
        assert PointTransaction.objects.filter(customer=customer).count() == 1

    def test_other_staff_not_blocked(self, customer, staff_actor, other_staff_actor):
        scanning.scan(str(customer.pk), staff_actor)

        result = scanning.scan(str(customer.pk), other_staff_actor)

        assert result.current_points == 2

    def test_invalid_code(self, customer, staff_actor):
        with pytest.raises(ValidationError) as exc_info:
            scanning.scan("12_34567", staff_actor)

        assert exc_info.value.code == "INVALID_QR_CODE"
        assert exc_info.value.data["outcome"] == "invalid_code"
        assert not PointTransaction.objects.exists()

    def test_unknown_customer(self, staff_actor):
        with pytest.raises(NotFoundError):
            scanning.scan("999999", staff_actor)

    def test_staff_cannot_be_scanned(self, other_staff, staff_actor):
        with pytest.raises(NotFoundError):
            scanning.scan(str(other_staff.pk), staff_actor)

    def test_customer_cannot_scan(self, customer, other_customer, customer_actor):
        with pytest.raises(AuthorizationError):
            scanning.scan(str(other_customer.pk), customer_actor)
        assert not PointTransaction.objects.exists()

    def test_offer_leaves_balance_untouched(self, customer, staff_actor, seed_points, free_coffee):
        seed_points(customer, 12)

        result = scanning.scan(str(customer.pk), staff_actor)

        assert result.outcome == ScanOutcome.REDEMPTION_OFFERED
        assert result.rewards == [free_coffee]
        assert result.suggested_reward == free_coffee
        assert not result.multiple_rewards
        assert result.transaction is None
        assert result.message == "Alice Doe has 12 points and is eligible for Free Coffee!"
        assert _points(customer) == 12

    def test_offer_multiple_rewards(
        self, customer, staff_actor, seed_points, free_coffee, free_pastry
    ):
        seed_points(customer, 20)

        result = scanning.scan(str(customer.pk), staff_actor)

        assert result.multiple_rewards
        assert result.rewards == [free_coffee, free_pastry]
        assert result.message == "Alice Doe has 20 points and can choose from 2 rewards!"

    def test_inactive_reward_not_offered(self, customer, staff_actor, seed_points, retired_reward):
        seed_points(customer, 5)

        result = scanning.scan(str(customer.pk), staff_actor)

        assert result.outcome == ScanOutcome.CREDIT_APPLIED
        assert result.current_points == 6


class TestCheckScan:
    def test_no_side_effects(self, customer, staff_actor):
        result = scanning.check_scan(str(customer.pk), staff_actor)

        assert result.can_scan
        assert result.outcome == ScanOutcome.SCANNED
        assert result.current_points == 0
        assert not PointTransaction.objects.exists()

    def test_reports_blocked(self, customer, staff_actor):
        scanning.scan(str(customer.pk), staff_actor)

        result = scanning.check_scan(str(customer.pk), staff_actor)

        assert not result.can_scan
        assert result.outcome == ScanOutcome.BLOCKED


class TestRedeem:
    def test_debits_reward_cost(self, customer, staff_actor, seed_points, free_coffee):
        seed_points(customer, 12)

        result = scanning.redeem(customer.pk, free_coffee.pk, staff_actor)

        assert result.outcome == ScanOutcome.DEBIT_APPLIED
        assert result.current_points == 2
        assert result.reward == free_coffee
        assert result.message == "Free Coffee reward redeemed successfully!"
        tx = result.transaction
        assert tx.points_delta == -10
        assert tx.kind == TransactionKind.REDEEM
        assert tx.reward == free_coffee
        assert tx.description == "Free Coffee reward redeemed"

    def test_insufficient_balance(self, customer, staff_actor, seed_points, free_coffee):
        seed_points(customer, 9)

        with pytest.raises(ConflictError) as exc_info:
            scanning.redeem(customer.pk, free_coffee.pk, staff_actor)

        assert exc_info.value.code == "INSUFFICIENT_POINTS"
        assert _points(customer) == 9
        assert PointTransaction.objects.filter(customer=customer).count() == 1

    def test_inactive_reward(self, customer, staff_actor, seed_points, retired_reward):
        seed_points(customer, 10)

        with pytest.raises(NotFoundError):
            scanning.redeem(customer.pk, retired_reward.pk, staff_actor)
        assert _points(customer) == 10

    def test_requires_staff(self, customer, customer_actor, seed_points, free_coffee):
        seed_points(customer, 10)

        with pytest.raises(AuthorizationError):
            scanning.redeem(customer.pk, free_coffee.pk, customer_actor)

    def test_redeem_best_picks_cheapest(
        self, customer, staff_actor, seed_points, free_coffee, free_pastry
    ):
        seed_points(customer, 30)

        result = scanning.redeem_best(customer.pk, staff_actor)

        assert result.reward == free_coffee
        assert result.current_points == 20

    def test_redeem_best_nothing_affordable(self, customer, staff_actor, free_coffee):
        with pytest.raises(ConflictError) as exc_info:
            scanning.redeem_best(customer.pk, staff_actor)
        assert exc_info.value.code == "NO_ELIGIBLE_REWARD"

    def test_signal_emitted(self, customer, staff_actor, seed_points, free_coffee):
        received = []

        def handler(sender, reward, transaction, **kwargs):
            received.append((reward, transaction))

        seed_points(customer, 10)
        reward_redeemed.connect(handler)
        try:
            result = scanning.redeem(customer.pk, free_coffee.pk, staff_actor)
        finally:
            reward_redeemed.disconnect(handler)

        assert received == [(free_coffee, result.transaction)]


class TestAdjust:
    def test_credit_and_debit(self, customer, staff_actor):
        scanning.adjust(customer.pk, 5, "Welcome bonus", staff_actor)
        tx = scanning.adjust(customer.pk, -2, "", staff_actor)

        assert tx.balance_after == 3
        assert tx.description == "Manual adjustment"
        assert tx.kind == TransactionKind.ADJUST

    def test_over_debit_rejected(self, customer, staff_actor):
        with pytest.raises(ConflictError):
            scanning.adjust(customer.pk, -1, "Oops", staff_actor)

    def test_zero_rejected(self, customer, staff_actor):
        with pytest.raises(ValidationError):
            scanning.adjust(customer.pk, 0, "Nothing", staff_actor)

    def test_delta_validated_once(self, customer, staff_actor):
        with patch.object(Gates, "points_delta", wraps=Gates.points_delta) as gate:
            scanning.adjust(customer.pk, 4, "Bonus", staff_actor)
        gate.assert_called_once_with(4)

    def test_requires_staff(self, customer, customer_actor):
        with pytest.raises(AuthorizationError):
            scanning.adjust(customer.pk, 100, "Free points", customer_actor)


class TestCounterScenario:
    def test_nine_points_to_free_coffee(self, customer, staff_actor, seed_points, free_coffee, clock):
        seed_points(customer, 9)
        token = str(customer.pk)

        first = scanning.scan(token, staff_actor)
        assert first.outcome == ScanOutcome.CREDIT_APPLIED
        assert first.current_points == 10

        with pytest.raises(CooldownError):
            scanning.scan(token, staff_actor)
        assert _points(customer) == 10

        clock.advance(16)
        offer = scanning.scan(token, staff_actor)
        assert offer.outcome == ScanOutcome.REDEMPTION_OFFERED
        assert offer.suggested_reward == free_coffee
        assert _points(customer) == 10

        done = scanning.redeem(customer.pk, offer.suggested_reward.pk, staff_actor)
        assert done.current_points == 0

        staff_entries = PointTransaction.objects.filter(
            customer=customer, actor_id=staff_actor.id
        ).order_by("id")
        assert [tx.points_delta for tx in staff_entries] == [1, -10]
        assert ledger.audit() == []
