"""Ginger exceptions."""


class GingerError(Exception):
    """
    Structured exception for ledger operations.

    Every error carries a machine-readable ``code``, a human ``message`` and
    arbitrary context in ``data``. Subclasses map to one HTTP status and one
    semantic ``return_code`` so the API layer never has to guess.

    Usage:
        try:
            scanning.scan(token, actor)
        except GingerError as e:
            if e.code == "SCAN_TOO_RECENT":
                handle_cooldown(e.data["retry_after"])
    """

    http_status = 400
    return_code = "ERROR"

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        payload = {
            "return_code": self.return_code,
            "error_code": self.code,
            "message": self.message,
        }
        if self.data:
            payload["details"] = self.data
        return payload


class ValidationError(GingerError):
    """Malformed input, rejected before any store access."""

    http_status = 400
    return_code = "VALIDATION_ERROR"

    _default_messages = {
        "INVALID_QR_CODE": "Invalid QR code",
        "MISSING_FIELD": "A required field is missing",
        "INVALID_ID": "Invalid identifier",
        "INVALID_POINTS": "Points must be a non-zero integer",
        "INVALID_LIMIT": "Limit must be a positive integer",
        "INVALID_REWARD": "Invalid reward data",
        "INVALID_JSON": "Request body is not valid JSON",
    }


class AuthorizationError(GingerError):
    """Actor is not allowed to perform the operation."""

    http_status = 403
    return_code = "ACCESS_DENIED"

    _default_messages = {
        "STAFF_REQUIRED": "Staff access required",
        "ADMIN_REQUIRED": "Staff admin access required",
        "OWNERSHIP_REQUIRED": "You can only access your own resources",
    }


class NotFoundError(GingerError):
    http_status = 404
    return_code = "NOT_FOUND"

    _default_messages = {
        "CUSTOMER_NOT_FOUND": "Customer not found",
        "REWARD_NOT_FOUND": "Reward not found or inactive",
    }


class CooldownError(GingerError):
    """Same customer scanned by the same staff member too recently."""

    http_status = 429
    return_code = "SCAN_COOLDOWN"

    _default_messages = {
        "SCAN_TOO_RECENT": "QR code scanned too recently",
    }


class ConflictError(GingerError):
    """Balance no longer covers the requested debit."""

    http_status = 409
    return_code = "CONFLICT"

    _default_messages = {
        "INSUFFICIENT_POINTS": "Insufficient points for this operation",
        "NO_ELIGIBLE_REWARD": "Customer does not have enough points for any reward",
    }


class ServerError(GingerError):
    http_status = 500
    return_code = "SERVER_ERROR"

    _default_messages = {
        "INTERNAL_ERROR": "Internal server error",
    }


class TransientStoreError(ServerError):
    """Store kept failing with connection errors after all retries."""

    http_status = 503

    _default_messages = {
        "STORE_UNAVAILABLE": "Database temporarily unavailable, please retry",
    }
