"""Ginger models.

Ledger models:
- PointsBalance: one row per customer, current point total
- PointTransaction: append-only log of every balance change
- Reward: catalog of redeemable rewards
- QRToken: customer identity printed in the QR code
"""

from ginger.models.reward import Reward
from ginger.models.balance import PointsBalance
from ginger.models.transaction import (
    AppendOnlyError,
    PointTransaction,
    TransactionKind,
)
from ginger.models.qr_token import QRToken

__all__ = [
    # Ledger
    "PointsBalance",
    "PointTransaction",
    "TransactionKind",
    "AppendOnlyError",
    # Catalog
    "Reward",
    # Identity
    "QRToken",
]
