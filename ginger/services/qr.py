"""QR token service.

Canonical scheme: the token is the customer's primary key in plain decimal
("42"). Anything else, including the legacy "<id>_<5 digits>" format, is
rejected by decode().
"""

import logging
import re

from ginger.exceptions import NotFoundError, ValidationError
from ginger.gates import Gates
from ginger.models import QRToken
from ginger.protocols import Actor
from ginger.services import customers

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"^[1-9][0-9]{0,18}$")


def encode(customer_id: int) -> str:
    """Token for a customer id."""
    if isinstance(customer_id, bool) or not isinstance(customer_id, int) or customer_id <= 0:
        raise ValueError(f"Invalid customer id: {customer_id!r}")
    return str(customer_id)


def decode(token) -> int | None:
    """Customer id for a token, or None when the format is invalid. Never raises."""
    if not isinstance(token, str):
        return None
    token = token.strip()
    if not TOKEN_PATTERN.match(token):
        return None
    return int(token)


def resolve(token):
    """
    Customer for a scanned token.

    Raises:
        ValidationError: If the token format is invalid
        NotFoundError: If no active non-staff customer has this id
    """
    customer_id = decode(token)
    if customer_id is None:
        logger.info("Invalid QR code format: %r", token)
        raise ValidationError("INVALID_QR_CODE")
    return customers.resolve(customer_id)


def get_or_create_token(customer_id, actor: Actor) -> QRToken:
    """
    Get the customer's QR token, creating it on first access.

    Customers get their own token; staff may get anyone's.
    """
    customer_id = customers.coerce_id(customer_id)
    Gates.ownership_or_staff(actor, customer_id)
    customer = customers.get(customer_id)
    if customer is None:
        raise NotFoundError("CUSTOMER_NOT_FOUND", customer_id=customer_id)

    token, created = QRToken.objects.get_or_create(
        customer=customer,
        defaults={"token_data": encode(customer.pk)},
    )
    if created:
        logger.info("Created QR token for customer %s", customer.pk)
    return token
