"""Reward service - matcher and catalog.

The matcher only ever sees active rewards. Catalog writes are admin-only at
the API layer; soft delete keeps redemption history valid.
"""

import logging

from ginger.exceptions import NotFoundError, ValidationError
from ginger.models import Reward

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "description", "points_required", "is_active"}


# ======================================================================
# Matcher
# ======================================================================


def available_rewards(balance: int) -> list[Reward]:
    """
    Active rewards the balance can pay for, cheapest first.

    Ascending points_required is the tie-break: attainable rewards are
    suggested before expensive ones.
    """
    return list(
        Reward.objects.filter(is_active=True, points_required__lte=balance)
        .order_by("points_required", "id")
    )


def single_best_reward(balance: int) -> Reward | None:
    """First reward from available_rewards(), or None."""
    return (
        Reward.objects.filter(is_active=True, points_required__lte=balance)
        .order_by("points_required", "id")
        .first()
    )


# ======================================================================
# Catalog
# ======================================================================


def active_rewards() -> list[Reward]:
    return list(Reward.objects.filter(is_active=True).order_by("points_required", "id"))


def all_rewards() -> list[Reward]:
    """All rewards including inactive ones (admin)."""
    return list(Reward.objects.order_by("points_required", "-created_at"))


def get(reward_id) -> Reward:
    """Get a reward (active or not) or raise NotFoundError."""
    try:
        return Reward.objects.get(pk=_reward_pk(reward_id))
    except Reward.DoesNotExist:
        raise NotFoundError("REWARD_NOT_FOUND", reward_id=reward_id)


def get_active(reward_id) -> Reward:
    """Get an active reward or raise NotFoundError."""
    try:
        return Reward.objects.get(pk=_reward_pk(reward_id), is_active=True)
    except Reward.DoesNotExist:
        raise NotFoundError("REWARD_NOT_FOUND", reward_id=reward_id)


def create_reward(name: str, points_required: int, description: str = "") -> Reward:
    """Create an active reward."""
    fields = _validated({
        "name": name,
        "points_required": points_required,
        "description": description,
    })
    reward = Reward.objects.create(**fields)
    logger.info("Created reward %s (%s points)", reward.name, reward.points_required)
    return reward


def update_reward(reward_id, **fields) -> Reward:
    """Update reward fields (only whitelisted fields are accepted)."""
    reward = get(reward_id)
    changes = _validated({k: v for k, v in fields.items() if k in UPDATABLE_FIELDS})
    for key, value in changes.items():
        setattr(reward, key, value)
    reward.save()
    logger.info("Updated reward %s: %s", reward.pk, sorted(changes))
    return reward


def deactivate_reward(reward_id) -> Reward:
    """Soft delete: the reward stops being offered, history keeps it."""
    reward = get(reward_id)
    if reward.is_active:
        reward.is_active = False
        reward.save(update_fields=["is_active", "updated_at"])
        logger.info("Deactivated reward %s", reward.name)
    return reward


def _reward_pk(reward_id) -> int:
    if isinstance(reward_id, str):
        reward_id = reward_id.strip()
        if reward_id.isascii() and reward_id.isdecimal():
            reward_id = int(reward_id)
    if isinstance(reward_id, bool) or not isinstance(reward_id, int) or reward_id <= 0:
        raise ValidationError("INVALID_ID", message="Invalid reward_id", field="reward_id")
    return reward_id


def _validated(fields: dict) -> dict:
    if "name" in fields:
        name = fields["name"]
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("INVALID_REWARD", message="name is required")
        if len(name.strip()) > 100:
            raise ValidationError("INVALID_REWARD", message="name is too long")
        fields["name"] = name.strip()

    if "points_required" in fields:
        points = fields["points_required"]
        if isinstance(points, bool) or not isinstance(points, int) or points < 1:
            raise ValidationError(
                "INVALID_REWARD",
                message="points_required must be a positive integer",
            )

    if "description" in fields:
        fields["description"] = (fields["description"] or "").strip()[:255]

    if "is_active" in fields and not isinstance(fields["is_active"], bool):
        raise ValidationError("INVALID_REWARD", message="is_active must be a boolean")

    return fields
