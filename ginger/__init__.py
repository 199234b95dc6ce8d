"""
Django Ginger - Coffee-shop loyalty ledger.

Usage:
    from ginger.services import ledger, rewards, scanning
    from ginger.gates import Gates
    from ginger.protocols import Actor

    actor = Actor.from_user(request.user)
    result = scanning.scan("42", actor)
    if result.outcome == ScanOutcome.REDEMPTION_OFFERED:
        scanning.redeem(result.customer_id, result.suggested_reward.pk, actor)

    # Gates validation
    Gates.can_scan(customer_id=42, staff_id=actor.id)
"""


def __getattr__(name):
    if name == "Gates":
        from ginger.gates import Gates

        return Gates
    if name == "GateResult":
        from ginger.gates import GateResult

        return GateResult
    if name == "GingerError":
        from ginger.exceptions import GingerError

        return GingerError
    if name == "ScanOutcome":
        from ginger.services.scanning import ScanOutcome

        return ScanOutcome
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Gates", "GateResult", "GingerError", "ScanOutcome"]
__version__ = "0.3.0"
