"""
Ginger JSON API.

Every response carries a ``return_code``: SUCCESS, or the error class
(VALIDATION_ERROR, UNAUTHENTICATED, ACCESS_DENIED, NOT_FOUND, SCAN_COOLDOWN,
CONFLICT, SERVER_ERROR) plus ``error_code`` and ``message``.

Authentication is the host project's job (session, JWT middleware, ...);
views only read ``request.user`` and trust it.
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from ginger.exceptions import GingerError, ServerError, ValidationError
from ginger.gates import Gates
from ginger.protocols import Actor, display_name
from ginger.services import customers, ledger, qr, reports, rewards, scanning

logger = logging.getLogger("ginger.api")


# =============================================================================
# Serializers
# =============================================================================


def _dt(value):
    return value.isoformat() if value else None


def reward_dict(reward) -> dict:
    return {
        "id": reward.pk,
        "name": reward.name,
        "description": reward.description,
        "points_required": reward.points_required,
        "is_active": reward.is_active,
        "created_at": _dt(reward.created_at),
        "updated_at": _dt(reward.updated_at),
    }


def transaction_dict(tx) -> dict:
    return {
        "id": tx.pk,
        "user_id": tx.customer_id,
        "scanned_by": tx.actor_id,
        "staff_name": display_name(tx.actor) or None,
        "kind": tx.kind,
        "points_amount": tx.points_delta,
        "balance_after": tx.balance_after,
        "description": tx.description,
        "reward_id": tx.reward_id,
        "transaction_date": _dt(tx.occurred_at),
    }


def staff_dict(user) -> dict:
    return {
        "id": user.pk,
        "email": user.email,
        "display_name": display_name(user),
        "created_at": _dt(getattr(user, "date_joined", None)),
        "last_active_at": _dt(user.last_login),
        "staff_admin": user.is_superuser,
    }


def scan_result_dict(result: scanning.ScanResult) -> dict:
    payload = {
        "return_code": "SUCCESS",
        "outcome": result.outcome.value,
        "message": result.message,
        "user_id": result.customer_id,
        "user_name": result.customer_name,
        "current_points": result.current_points,
    }
    if result.transaction is not None:
        payload["new_total"] = result.transaction.balance_after
        payload["transaction"] = transaction_dict(result.transaction)
    if result.outcome in (scanning.ScanOutcome.CREDIT_APPLIED, scanning.ScanOutcome.REDEMPTION_OFFERED):
        payload["reward_eligible"] = result.reward_eligible
        payload["multiple_rewards"] = result.multiple_rewards
        payload["available_rewards"] = [reward_dict(r) for r in result.rewards]
        if result.suggested_reward is not None:
            payload["reward"] = reward_dict(result.suggested_reward)
    if result.reward is not None:
        payload["reward"] = reward_dict(result.reward)
    if result.can_scan is not None:
        payload["can_scan"] = result.can_scan
    return payload


# =============================================================================
# Base view
# =============================================================================


@method_decorator(csrf_exempt, name="dispatch")
class LedgerAPIView(View):
    """
    Base for every Ginger endpoint.

    Resolves the Actor, turns GingerError into its JSON envelope and hides
    anything unexpected behind a generic 500.
    """

    http_method_names = ["get", "post", "put", "delete"]

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse(
                {
                    "return_code": "UNAUTHENTICATED",
                    "error_code": "MISSING_TOKEN",
                    "message": "Authentication required",
                },
                status=401,
            )
        self.actor = Actor.from_user(request.user)

        try:
            return super().dispatch(request, *args, **kwargs)
        except GingerError as exc:
            if isinstance(exc, ServerError):
                logger.error("%s %s failed: %s", request.method, request.path, exc)
            return JsonResponse(exc.as_dict(), status=exc.http_status)
        except Exception:
            logger.exception("%s %s failed", request.method, request.path)
            return JsonResponse(
                ServerError("INTERNAL_ERROR").as_dict(),
                status=500,
            )

    def json_body(self, request) -> dict:
        try:
            data = json.loads(request.body or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
            raise ValidationError("INVALID_JSON")
        if not isinstance(data, dict):
            raise ValidationError("INVALID_JSON")
        return data

    def require(self, data: dict, *names: str) -> list:
        missing = [n for n in names if data.get(n) in (None, "")]
        if missing:
            raise ValidationError(
                "MISSING_FIELD",
                message=f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required",
                fields=missing,
            )
        return [data[n] for n in names]

    def query_limit(self, request) -> int | None:
        raw = request.GET.get("limit")
        if raw in (None, ""):
            return None
        if not (raw.isascii() and raw.isdecimal()):
            raise ValidationError("INVALID_LIMIT", limit=raw)
        return int(raw)


# =============================================================================
# QR
# =============================================================================


class QRScanView(LedgerAPIView):
    """POST qr/scan {qr_code_data} - credit a point or offer rewards (staff)."""

    def post(self, request):
        (token,) = self.require(self.json_body(request), "qr_code_data")
        result = scanning.scan(token, self.actor)
        return JsonResponse(scan_result_dict(result))


class QRValidateView(LedgerAPIView):
    """POST qr/validate {qr_code_data} - who is this and can they be scanned (staff)."""

    def post(self, request):
        (token,) = self.require(self.json_body(request), "qr_code_data")
        result = scanning.check_scan(token, self.actor)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "message": result.message,
                "can_scan": result.can_scan,
                "user": {
                    "user_id": result.customer_id,
                    "user_name": result.customer_name,
                    "current_points": result.current_points,
                },
            }
        )


class QRTokenView(LedgerAPIView):
    """GET qr/user/<id> - own QR token, or anyone's for staff."""

    def get(self, request, user_id):
        token = qr.get_or_create_token(user_id, self.actor)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "message": "QR code retrieved successfully",
                "qr_code": {
                    "user_id": token.customer_id,
                    "qr_code_data": token.token_data,
                    "user_name": display_name(token.customer),
                },
            }
        )


class RedeemRewardView(LedgerAPIView):
    """POST qr/redeem-reward {user_id, reward_id?} - confirm a redemption (staff)."""

    def post(self, request):
        data = self.json_body(request)
        (user_id,) = self.require(data, "user_id")
        reward_id = data.get("reward_id")
        if reward_id in (None, ""):
            result = scanning.redeem_best(user_id, self.actor)
        else:
            result = scanning.redeem(user_id, reward_id, self.actor)
        return JsonResponse(scan_result_dict(result))


# =============================================================================
# Points
# =============================================================================


class PointsBalanceView(LedgerAPIView):
    """GET points/user/<id> - current balance (owner or staff)."""

    def get(self, request, user_id):
        balance = ledger.balance_for(user_id, self.actor)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "points": {
                    "id": balance.pk,
                    "user_id": balance.customer_id,
                    "current_points": balance.current_points,
                    "last_updated": _dt(balance.last_updated),
                },
            }
        )


class TransactionHistoryView(LedgerAPIView):
    """GET points/transactions/<id>?limit=N - history, newest first (owner or staff)."""

    def get(self, request, user_id):
        txs = ledger.history_for(user_id, self.actor, self.query_limit(request))
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "transactions": [transaction_dict(tx) for tx in txs],
            }
        )


class AdjustPointsView(LedgerAPIView):
    """POST points/adjust {user_id, points_amount, description} - manual change (staff)."""

    def post(self, request):
        data = self.json_body(request)
        user_id, points = self.require(data, "user_id", "points_amount")
        tx = scanning.adjust(user_id, points, data.get("description", ""), self.actor)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "message": "Points updated successfully",
                "new_total": tx.balance_after,
                "transaction": transaction_dict(tx),
            }
        )


class CanScanView(LedgerAPIView):
    """POST points/can-scan {qr_code_data} - cooldown check without side effects (staff)."""

    def post(self, request):
        (token,) = self.require(self.json_body(request), "qr_code_data")
        result = scanning.check_scan(token, self.actor)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "can_scan": result.can_scan,
                "message": result.message,
            }
        )


# =============================================================================
# Rewards
# =============================================================================


class RewardListView(LedgerAPIView):
    """GET rewards/ - active catalog."""

    def get(self, request):
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "message": "Rewards retrieved successfully",
                "rewards": [reward_dict(r) for r in rewards.active_rewards()],
            }
        )


class AvailableRewardView(LedgerAPIView):
    """GET rewards/available/<points> - what a balance can buy."""

    def get(self, request, points):
        available = rewards.available_rewards(points)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "message": "Available reward found" if available else "No available rewards",
                "reward": reward_dict(available[0]) if available else None,
                "rewards": [reward_dict(r) for r in available],
            }
        )


# =============================================================================
# Admin
# =============================================================================


class AdminStaffView(LedgerAPIView):
    def get(self, request):
        Gates.admin_actor(self.actor)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "staff": [staff_dict(u) for u in customers.staff_members()],
            }
        )


class AdminAnalyticsView(LedgerAPIView):
    def get(self, request):
        Gates.admin_actor(self.actor)
        return JsonResponse({"return_code": "SUCCESS", "analytics": reports.analytics()})


class AdminTransactionsView(LedgerAPIView):
    def get(self, request):
        Gates.admin_actor(self.actor)
        txs = ledger.recent(self.query_limit(request))
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "transactions": [
                    {
                        **transaction_dict(tx),
                        "customer_name": display_name(tx.customer),
                        "customer_email": tx.customer.email,
                    }
                    for tx in txs
                ],
            }
        )


class AdminDashboardView(LedgerAPIView):
    def get(self, request):
        data = reports.dashboard(self.actor)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "dashboard": {
                    "staff": [staff_dict(u) for u in data["staff"]],
                    "analytics": data["analytics"],
                    "recent_transactions": [
                        transaction_dict(tx) for tx in data["recent_transactions"]
                    ],
                },
            }
        )


class AdminRewardListView(LedgerAPIView):
    """GET|POST admin/rewards - full catalog, create."""

    def get(self, request):
        Gates.admin_actor(self.actor)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "rewards": [reward_dict(r) for r in rewards.all_rewards()],
            }
        )

    def post(self, request):
        Gates.admin_actor(self.actor)
        data = self.json_body(request)
        name, points = self.require(data, "name", "points_required")
        reward = rewards.create_reward(name, points, data.get("description", ""))
        return JsonResponse(
            {"return_code": "SUCCESS", "reward": reward_dict(reward)},
            status=201,
        )


class AdminRewardDetailView(LedgerAPIView):
    """PUT|DELETE admin/rewards/<id> - update, deactivate."""

    def put(self, request, reward_id):
        Gates.admin_actor(self.actor)
        data = self.json_body(request)
        fields = {k: v for k, v in data.items() if k in rewards.UPDATABLE_FIELDS}
        reward = rewards.update_reward(reward_id, **fields)
        return JsonResponse({"return_code": "SUCCESS", "reward": reward_dict(reward)})

    def delete(self, request, reward_id):
        Gates.admin_actor(self.actor)
        reward = rewards.deactivate_reward(reward_id)
        return JsonResponse(
            {
                "return_code": "SUCCESS",
                "message": "Reward deactivated",
                "reward": reward_dict(reward),
            }
        )
