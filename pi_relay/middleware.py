"""
Middleware for Pi relay routes.

Provides the bearer-token guard and response helpers used by routes.

Usage:
    from pi_relay.middleware import require_pi_user, no_cache

    @bp.route("/balance", methods=["GET"])
    @require_pi_user
    @no_cache
    def balance():
        # g.pi_user and g.identity_id are available
        return jsonify(PaymentService.get_balance(g.identity_id))

Note: Service imports are lazy (inside functions) so tests can patch them.
"""

from functools import wraps
from flask import request, g, make_response

from pi_relay.exceptions import RelayError


def _get_identity_service():
    """Lazy import of IdentityService."""
    from pi_relay.services.identity_service import IdentityService
    return IdentityService


def no_cache(f):
    """
    Decorator that adds Cache-Control headers to prevent caching.

    Use for anything user-specific (balances, payment state).
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        response = make_response(f(*args, **kwargs))
        response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate, max-age=0'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
        return response

    return decorated


def get_json_body() -> dict:
    """Request JSON as a dict; anything else (missing, malformed, a list) is {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def require_pi_user(f=None, *, payload=None):
    """
    Decorator that requires a verified Pi user.

    Order of checks, all before the route runs:
        1. "Authorization: Bearer <token>" present        (401 MissingCredential)
        2. payload(body) if given, passed as kwarg `ref`  (400 InvalidInput)
        3. token verified upstream via GET /me            (401 / upstream status)

    Checks 1 and 2 are local, so a request rejected by them never reaches
    the Pi API. Verification runs on every request.

    Sets on g:
        - g.pi_user: The PiUser returned by verification
        - g.identity_id: The verified uid (string)

    Usage:
        @require_pi_user
        def view(): ...

        @require_pi_user(payload=PaymentReference.for_approval)
        def view(ref): ...
    """
    def decorator(view):
        @wraps(view)
        def decorated(*args, **kwargs):
            IdentityService = _get_identity_service()

            try:
                token = IdentityService.parse_bearer(request.headers.get("Authorization"))
                if payload is not None:
                    kwargs["ref"] = payload(get_json_body())
                user = IdentityService.verify_token(token)
            except RelayError as e:
                print(
                    f"[MIDDLEWARE] Rejected {request.method} {request.path}: "
                    f"status={e.status_code}, code={e.code}, "
                    f"origin={request.headers.get('Origin', '(no origin)')}"
                )
                raise

            g.pi_user = user
            g.identity_id = user.uid

            return view(*args, **kwargs)

        return decorated

    if f is not None:
        return decorator(f)
    return decorator
