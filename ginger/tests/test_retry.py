"""Tests for transient store retry."""

from unittest.mock import Mock, patch

import pytest
from django.db import IntegrityError, InterfaceError, OperationalError, transaction

from ginger.exceptions import ConflictError, ServerError, TransientStoreError
from ginger.retry import retry_on_transient


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("ginger.retry.time.sleep") as sleep:
        yield sleep


@pytest.mark.django_db
class TestRetryOnTransient:
    def test_success_first_try(self):
        func = Mock(return_value="ok")
        assert retry_on_transient(func)() == "ok"
        assert func.call_count == 1

    @pytest.mark.parametrize("error", [OperationalError, InterfaceError])
    def test_retries_then_succeeds(self, error, no_sleep):
        func = Mock(side_effect=[error("connection reset"), "ok"])
        func.__qualname__ = "flaky"

        assert retry_on_transient(func)() == "ok"
        assert func.call_count == 2
        no_sleep.assert_called_once()

    def test_exhaustion(self, settings):
        settings.GINGER = {"STORE_RETRY_ATTEMPTS": 4, "STORE_RETRY_BACKOFF_SECONDS": 0}
        func = Mock(side_effect=OperationalError("connection refused"))
        func.__qualname__ = "down"

        with pytest.raises(TransientStoreError) as exc_info:
            retry_on_transient(func)()

        assert func.call_count == 4
        assert isinstance(exc_info.value, ServerError)
        assert exc_info.value.http_status == 503
        assert exc_info.value.data["attempts"] == 4
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_backoff_is_linear(self, settings, no_sleep):
        settings.GINGER = {"STORE_RETRY_ATTEMPTS": 3, "STORE_RETRY_BACKOFF_SECONDS": 0.5}
        func = Mock(side_effect=OperationalError("gone"))
        func.__qualname__ = "down"

        with pytest.raises(TransientStoreError):
            retry_on_transient(func)()

        assert [c.args[0] for c in no_sleep.call_args_list] == [0.5, 1.0]

    def test_stops_when_outer_transaction_needs_rollback(self, no_sleep):
        def breaks_outer(*args, **kwargs):
            transaction.set_rollback(True)
            raise OperationalError("server closed the connection unexpectedly")

        func = Mock(side_effect=breaks_outer)
        func.__qualname__ = "broken"

        try:
            with pytest.raises(TransientStoreError):
                retry_on_transient(func)()
        finally:
            transaction.set_rollback(False)

        assert func.call_count == 1
        no_sleep.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [IntegrityError("duplicate key"), ConflictError("INSUFFICIENT_POINTS"), ValueError("bad")],
    )
    def test_non_transient_propagates(self, error):
        func = Mock(side_effect=error)

        with pytest.raises(type(error)):
            retry_on_transient(func)()

        assert func.call_count == 1
