"""Actor protocols.

The auth layer (sessions, JWT, ...) lives outside Ginger. Every ledger
operation receives an already-authenticated ``Actor`` and trusts it.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Actor:
    """Authenticated caller of a ledger operation."""

    id: int
    is_staff: bool = False
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        """Build an Actor from a Django user (staff admin = superuser)."""
        return cls(
            id=user.pk,
            is_staff=bool(user.is_staff),
            is_admin=bool(user.is_superuser),
        )


def display_name(user: Any) -> str:
    """Full name, falling back to email, then username."""
    if user is None:
        return ""
    full_name = user.get_full_name().strip() if hasattr(user, "get_full_name") else ""
    return full_name or getattr(user, "email", "") or user.get_username()

