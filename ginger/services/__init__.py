"""Ginger services.

- customers: customer lookup (users outside the staff)
- ledger: balance store, transaction log, audit
- rewards: reward matcher and catalog
- qr: QR token codec
- scanning: scan / redeem flow
- reports: admin dashboard aggregates
"""

from ginger.services import customers
from ginger.services import ledger
from ginger.services import rewards
from ginger.services import qr
from ginger.services import scanning
from ginger.services import reports

__all__ = ["customers", "ledger", "rewards", "qr", "scanning", "reports"]
