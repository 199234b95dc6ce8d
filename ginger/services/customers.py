"""Customer lookup.

Customers are users of ``settings.AUTH_USER_MODEL``. Staff accounts and
inactive users are not part of the ledger.
"""

from django.contrib.auth import get_user_model

from ginger.exceptions import NotFoundError, ValidationError


def coerce_id(value, field: str = "user_id") -> int:
    """Accept positive ints and digit strings; reject everything else."""
    if isinstance(value, bool):
        raise ValidationError("INVALID_ID", message=f"Invalid {field}", field=field)
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdecimal():
            value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise ValidationError("INVALID_ID", message=f"Invalid {field}", field=field)
    return value


def get(customer_id: int):
    """Get an active, non-staff user by primary key, or None."""
    User = get_user_model()
    try:
        return User.objects.get(pk=customer_id, is_active=True, is_staff=False)
    except User.DoesNotExist:
        return None


def resolve(customer_id):
    """Get customer or raise NotFoundError."""
    customer_id = coerce_id(customer_id)
    customer = get(customer_id)
    if customer is None:
        raise NotFoundError("CUSTOMER_NOT_FOUND", customer_id=customer_id)
    return customer


def staff_members() -> list:
    """List staff accounts, newest first."""
    User = get_user_model()
    return list(User.objects.filter(is_staff=True).order_by("-date_joined", "-pk"))
