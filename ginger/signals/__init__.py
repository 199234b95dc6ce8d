"""
Ginger signals - public event API.

Emitted signals (after the ledger transaction commits):
- points_posted: Emitted by services.ledger.post() for every balance change
- reward_redeemed: Emitted by services.scanning.redeem()
"""

from django.dispatch import Signal

# Ledger signals (emitted by services)
points_posted = Signal()  # sender=PointTransaction, transaction=PointTransaction
reward_redeemed = Signal()  # sender=Reward, reward=Reward, transaction=PointTransaction
