"""
/api/balance - Pi balance for the verified caller.

The uid always comes from token verification (g.identity_id); any uid the
caller sends in the query string or body is ignored.
"""

from flask import Blueprint, jsonify, g

from pi_relay.exceptions import BalanceFetchFailed
from pi_relay.middleware import require_pi_user, no_cache
from pi_relay.services.payment_service import PaymentService
from pi_relay.services.pi_api import UpstreamError
from pi_relay.utils.helpers import log_event

bp = Blueprint("balance", __name__)


@bp.route("/balance", methods=["GET"])
@require_pi_user
@no_cache
def get_balance():
    """
    Response (200):
    {
        "available": 12.5,
        "locked": 1.0,
        "currency": "PI",
        "last_updated": "2024-01-01T00:00:00.000Z"
    }
    """
    try:
        balance = PaymentService.get_balance(g.identity_id)
    except UpstreamError as e:
        log_event("BALANCE", "fetch failed", {
            "uid": g.identity_id,
            "status": e.status_code,
            "upstream": e.payload,
            "error": e.describe(),
        })
        raise BalanceFetchFailed.from_upstream(e) from e

    return jsonify(balance)
