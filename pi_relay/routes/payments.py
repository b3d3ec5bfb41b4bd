"""
Payment routes - server-side steps of the Pi payment flow.

Handles:
- POST /api/approve            {paymentId}        -> approve with Pi API
- POST /api/complete           {paymentId, txid}  -> complete with Pi API
- GET  /api/payment/<paymentId>                   -> current payment state

Input is validated before any upstream call (400 on missing fields).
Upstream failures are logged in full here and surfaced with the upstream
status when known.
"""

from flask import Blueprint, jsonify, g

from pi_relay.exceptions import ApprovalFailed, CompletionFailed, FetchFailed
from pi_relay.middleware import require_pi_user, no_cache
from pi_relay.services.payment_service import PaymentReference, PaymentService
from pi_relay.services.pi_api import UpstreamError
from pi_relay.utils.helpers import log_event

bp = Blueprint("payments", __name__)


def _log_upstream_failure(action: str, ref: PaymentReference, e: UpstreamError) -> None:
    log_event("PAYMENTS", f"{action} failed", {
        "payment_id": ref.payment_id,
        "uid": g.identity_id,
        "status": e.status_code,
        "upstream": e.payload,
        "error": e.describe(),
    })


@bp.route("/approve", methods=["POST"])
@require_pi_user(payload=PaymentReference.for_approval)
def approve_payment(ref: PaymentReference):
    """
    Approve a payment created by the frontend SDK.

    Response (200):
    {"status": {...}, "payment_id": "...", "amount": 1.0, "memo": "..."}
    """
    try:
        result = PaymentService.approve(ref)
    except UpstreamError as e:
        _log_upstream_failure("approve", ref, e)
        raise ApprovalFailed.from_upstream(e) from e

    print(f"[PAYMENTS] Approved payment={ref.payment_id} uid={g.identity_id}")
    return jsonify(result)


@bp.route("/complete", methods=["POST"])
@require_pi_user(payload=PaymentReference.for_completion)
def complete_payment(ref: PaymentReference):
    """
    Complete a payment after the user signed the blockchain transaction.

    Response (200):
    {"status": {...}, "payment_id": "...", "txid": "...", "verified": true,
     "completed_at": "<iso>"}
    """
    try:
        result = PaymentService.complete(ref)
    except UpstreamError as e:
        _log_upstream_failure("complete", ref, e)
        raise CompletionFailed.from_upstream(e) from e

    print(f"[PAYMENTS] Completed payment={ref.payment_id} txid={ref.txid} uid={g.identity_id}")
    return jsonify(result)


@bp.route("/payment/<payment_id>", methods=["GET"])
@require_pi_user
@no_cache
def get_payment(payment_id):
    ref = PaymentReference.for_lookup(payment_id)

    try:
        result = PaymentService.get_payment(ref)
    except UpstreamError as e:
        _log_upstream_failure("fetch", ref, e)
        raise FetchFailed.from_upstream(e) from e

    return jsonify(result)
