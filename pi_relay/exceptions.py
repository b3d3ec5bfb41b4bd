"""
Relay error taxonomy.

Every failure the relay reports to a caller is a RelayError subclass carrying
a stable code, an HTTP status and a caller-safe message. The optional
``detail`` is server-side context (upstream body, exception text) and only
reaches the response when diagnostics are enabled.

Usage:
    from pi_relay.exceptions import ApprovalFailed

    try:
        payment = PaymentService.approve(payment_id)
    except UpstreamError as e:
        raise ApprovalFailed.from_upstream(e)
"""

from typing import Optional


class RelayError(Exception):
    """Base class for errors rendered as JSON error responses."""

    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail
        super().__init__(self.message)

    @classmethod
    def from_upstream(cls, error) -> "RelayError":
        """
        Build an error from a failed upstream call.

        Status is the upstream HTTP status when one was received, else 500.
        The upstream "message" field replaces the generic message when present.
        """
        status = error.status_code if error.status_code else 500
        return cls(message=error.message, status_code=status, detail=error.describe())

    def to_dict(self, include_detail: bool = False) -> dict:
        body = {"error": self.message, "code": self.code}
        if include_detail and self.detail:
            body["detail"] = self.detail
        return body


# ─────────────────────────────────────────────────────────────
# Authentication
# ─────────────────────────────────────────────────────────────

class MissingCredential(RelayError):
    code = "MISSING_CREDENTIAL"
    status_code = 401
    default_message = "Authorization header required"


class InvalidCredential(RelayError):
    code = "INVALID_CREDENTIAL"
    status_code = 401
    default_message = "Invalid authentication token"


class AuthFailure(RelayError):
    """The upstream identity check itself failed."""
    code = "AUTH_FAILED"
    status_code = 500
    default_message = "Authentication failed"


# ─────────────────────────────────────────────────────────────
# Input validation
# ─────────────────────────────────────────────────────────────

class InvalidInput(RelayError):
    code = "INVALID_INPUT"
    status_code = 400
    default_message = "Invalid request"


class PayloadTooLarge(RelayError):
    code = "PAYLOAD_TOO_LARGE"
    status_code = 413
    default_message = "Request body too large"


# ─────────────────────────────────────────────────────────────
# Upstream operations
# ─────────────────────────────────────────────────────────────

class BalanceFetchFailed(RelayError):
    code = "BALANCE_FETCH_FAILED"
    default_message = "Failed to fetch balance"


class ApprovalFailed(RelayError):
    code = "APPROVAL_FAILED"
    default_message = "Payment approval failed"


class CompletionFailed(RelayError):
    code = "COMPLETION_FAILED"
    default_message = "Payment completion failed"


class FetchFailed(RelayError):
    code = "FETCH_FAILED"
    default_message = "Failed to fetch payment"


# ─────────────────────────────────────────────────────────────
# Routing / catch-all
# ─────────────────────────────────────────────────────────────

class NotFound(RelayError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Endpoint not found"


class InternalFault(RelayError):
    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Internal server error"
