"""Bounded retry for transient store failures.

Only connection-level errors (reset, refused, server gone) are retried.
Constraint and data errors, and every GingerError, propagate at once.
"""

import functools
import logging
import time

from django.db import InterfaceError, OperationalError, connection

from ginger.conf import ginger_settings
from ginger.exceptions import TransientStoreError

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, InterfaceError)


def retry_on_transient(func):
    """
    Retry ``func`` on transient DB errors with linear backoff.

    The wrapped function must own its ``transaction.atomic()`` block so a
    failed attempt leaves nothing behind. Inside an outer atomic block (e.g.
    ATOMIC_REQUESTS) retrying stops as soon as that block is marked for
    rollback. After STORE_RETRY_ATTEMPTS, or on such a stop, the last error
    is surfaced as TransientStoreError.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        attempts = max(1, int(ginger_settings.STORE_RETRY_ATTEMPTS))
        backoff = float(ginger_settings.STORE_RETRY_BACKOFF_SECONDS)
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except TRANSIENT_ERRORS as exc:
                last_error = exc
                logger.warning(
                    "%s: transient store error (attempt %s/%s): %s",
                    func.__qualname__,
                    attempt,
                    attempts,
                    exc,
                )
                if _outer_transaction_broken():
                    break
                if attempt < attempts:
                    _drop_broken_connection()
                    time.sleep(backoff * attempt)

        raise TransientStoreError(
            "STORE_UNAVAILABLE", attempts=attempts
        ) from last_error

    return wrapper


def _outer_transaction_broken() -> bool:
    # Enclosing atomic block is marked for rollback; nothing more can run in it.
    return connection.in_atomic_block and connection.needs_rollback


def _drop_broken_connection() -> None:
    # Inside an outer atomic block the connection must stay open.
    if not connection.in_atomic_block:
        connection.close_if_unusable_or_obsolete()
