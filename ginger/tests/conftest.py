"""Pytest fixtures for Ginger tests."""

from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from ginger.models import Reward
from ginger.protocols import Actor


@pytest.fixture
def customer(db):
    """Create a loyalty customer."""
    return get_user_model().objects.create_user(
        username="alice",
        email="alice@example.com",
        password="pw",
        first_name="Alice",
        last_name="Doe",
    )


@pytest.fixture
def other_customer(db):
    """Create a second loyalty customer."""
    return get_user_model().objects.create_user(
        username="bob",
        email="bob@example.com",
        password="pw",
    )


@pytest.fixture
def staff(db):
    """Create a barista (staff, not admin)."""
    return get_user_model().objects.create_user(
        username="barista",
        email="barista@example.com",
        password="pw",
        first_name="Sam",
        last_name="Barista",
        is_staff=True,
    )


@pytest.fixture
def other_staff(db):
    return get_user_model().objects.create_user(
        username="barista2",
        email="barista2@example.com",
        password="pw",
        is_staff=True,
    )


@pytest.fixture
def staff_admin(db):
    """Create a staff admin (manages rewards and staff)."""
    return get_user_model().objects.create_user(
        username="owner",
        email="owner@example.com",
        password="pw",
        is_staff=True,
        is_superuser=True,
    )


@pytest.fixture
def staff_actor(staff):
    return Actor.from_user(staff)


@pytest.fixture
def other_staff_actor(other_staff):
    return Actor.from_user(other_staff)


@pytest.fixture
def customer_actor(customer):
    return Actor.from_user(customer)


@pytest.fixture
def admin_actor(staff_admin):
    return Actor.from_user(staff_admin)


@pytest.fixture
def free_coffee(db):
    return Reward.objects.create(
        name="Free Coffee",
        description="Any regular coffee",
        points_required=10,
    )


@pytest.fixture
def free_pastry(db):
    return Reward.objects.create(
        name="Free Pastry",
        description="Croissant or muffin",
        points_required=15,
    )


@pytest.fixture
def retired_reward(db):
    """Inactive reward (soft deleted)."""
    return Reward.objects.create(
        name="Free Mug",
        points_required=5,
        is_active=False,
    )


@pytest.fixture
def seed_points(db):
    """Give a customer points through the ledger as a system entry."""
    from ginger.services import ledger

    def _seed(customer, points):
        return ledger.post(customer, None, points, "Opening balance")

    return _seed


class Clock:
    """Shifts timezone.now() forward without touching stored timestamps."""

    def __init__(self):
        self.offset = timedelta(0)

    def advance(self, seconds: float) -> None:
        self.offset += timedelta(seconds=seconds)


@pytest.fixture
def clock(monkeypatch):
    clock = Clock()
    real_now = timezone.now
    monkeypatch.setattr(timezone, "now", lambda: real_now() + clock.offset)
    return clock
