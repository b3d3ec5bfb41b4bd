"""
Payment Service - Server-side Pi payment operations.

Flow (state lives entirely in the Pi API; the relay keeps none):
1. Frontend creates a payment with the Pi SDK
2. POST /api/approve -> approve(payment_id)
3. User signs the blockchain transaction in the Pi Browser
4. POST /api/complete -> complete(payment_id, txid)

All calls use the service credential. Payment identifiers are opaque
references authorized by the Pi API itself; the relay does not check that a
payment belongs to the caller. Balances are only ever looked up for the
verified uid.

Every method raises UpstreamError on failure; routes translate it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pi_relay.exceptions import InvalidInput
from pi_relay.services.pi_api import pi_get, pi_post, quote_segment
from pi_relay.utils.helpers import is_nonempty_str, now_iso


def _is_payment_id(value: Any) -> bool:
    # "." and ".." would be collapsed out of the upstream path
    return is_nonempty_str(value) and set(value.strip()) != {"."}


@dataclass(frozen=True)
class PaymentReference:
    """Caller-supplied payment identifiers, validated for presence and type."""

    payment_id: str
    txid: Optional[str] = None

    @classmethod
    def for_approval(cls, body: Dict[str, Any]) -> "PaymentReference":
        payment_id = body.get("paymentId")
        if not _is_payment_id(payment_id):
            raise InvalidInput("Invalid payment ID")
        return cls(payment_id=payment_id)

    @classmethod
    def for_completion(cls, body: Dict[str, Any]) -> "PaymentReference":
        payment_id = body.get("paymentId")
        txid = body.get("txid")
        if not _is_payment_id(payment_id) or not is_nonempty_str(txid):
            raise InvalidInput("Missing payment ID or transaction ID")
        return cls(payment_id=payment_id, txid=txid)

    @classmethod
    def for_lookup(cls, payment_id: Any) -> "PaymentReference":
        if not _is_payment_id(payment_id):
            raise InvalidInput("Invalid payment ID")
        return cls(payment_id=payment_id)


def _transaction(payment: Dict[str, Any]) -> Dict[str, Any]:
    tx = payment.get("transaction")
    return tx if isinstance(tx, dict) else {}


class PaymentService:
    """Service for balance and payment calls against the Pi API."""

    @staticmethod
    def get_balance(uid: str) -> Dict[str, Any]:
        """
        Fetch the balance for a verified uid.

        Returns:
            {"available": ..., "locked": ..., "currency": "PI", "last_updated": "<iso>"}
        """
        data = pi_get(f"/accounts/{quote_segment(uid)}/balance")
        return {
            "available": data.get("available_balance"),
            "locked": data.get("locked_balance"),
            "currency": "PI",
            "last_updated": now_iso(),
        }

    @staticmethod
    def approve(ref: PaymentReference) -> Dict[str, Any]:
        """Approve a payment server-side (developer approval step)."""
        payment = pi_post(f"/payments/{quote_segment(ref.payment_id)}/approve", {})
        return {
            "status": payment.get("status"),
            "payment_id": ref.payment_id,
            "amount": payment.get("amount"),
            "memo": payment.get("memo"),
        }

    @staticmethod
    def complete(ref: PaymentReference) -> Dict[str, Any]:
        """Complete a payment with the blockchain transaction id."""
        payment = pi_post(f"/payments/{quote_segment(ref.payment_id)}/complete", {"txid": ref.txid})
        tx = _transaction(payment)
        return {
            "status": payment.get("status"),
            "payment_id": ref.payment_id,
            "txid": ref.txid,
            "verified": bool(tx.get("verified", False)),
            "completed_at": now_iso(),
        }

    @staticmethod
    def get_payment(ref: PaymentReference) -> Dict[str, Any]:
        """Fetch a payment's current upstream state."""
        payment = pi_get(f"/payments/{quote_segment(ref.payment_id)}")
        tx = _transaction(payment)
        return {
            "id": payment.get("identifier") or ref.payment_id,
            "amount": payment.get("amount"),
            "status": payment.get("status"),
            "created_at": payment.get("created_at"),
            "txid": tx.get("txid"),
            "verified": bool(tx.get("verified", False)),
        }
