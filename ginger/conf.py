"""
Ginger configuration.

Usage in settings.py:
    GINGER = {
        "SCAN_COOLDOWN_SECONDS": 15,
        "STORE_RETRY_ATTEMPTS": 3,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class GingerSettings:
    """Ginger configuration settings."""

    # Same (customer, staff) pair cannot be scanned twice inside this window
    SCAN_COOLDOWN_SECONDS: int = 15

    # Points credited by a scan that does not offer a reward
    SCAN_CREDIT_POINTS: int = 1

    # Transaction history paging
    TRANSACTION_HISTORY_LIMIT: int = 50
    TRANSACTION_HISTORY_MAX_LIMIT: int = 200
    ADMIN_RECENT_LIMIT: int = 20

    # Transient store failures (connection reset, refused, ...)
    STORE_RETRY_ATTEMPTS: int = 3
    STORE_RETRY_BACKOFF_SECONDS: float = 0.2

    # Admin analytics
    RECENT_REGISTRATION_DAYS: int = 30


def get_ginger_settings() -> GingerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "GINGER", {})
    return GingerSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_ginger_settings(), name)


ginger_settings = _LazySettings()
