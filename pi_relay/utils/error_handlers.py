"""
HTTP Error Handlers
-------------------
Every error leaves the relay as JSON with at least an "error" field:

    {"error": "<caller-safe message>", "code": "<STABLE_CODE>"}

A "detail" field is added only when RELAY_DIAGNOSTICS is enabled.

Usage:
    from pi_relay.utils.error_handlers import register_error_handlers
    register_error_handlers(app)
"""

import traceback

from flask import jsonify
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound as WerkzeugNotFound, RequestEntityTooLarge

from pi_relay.config import get_config
from pi_relay.exceptions import InternalFault, NotFound, PayloadTooLarge, RelayError


def make_error_response(error: RelayError):
    """Render a RelayError as a (Response, status) tuple."""
    include_detail = get_config().DIAGNOSTICS_ENABLED
    return jsonify(error.to_dict(include_detail=include_detail)), error.status_code


def handle_relay_error(e: RelayError):
    return make_error_response(e)


def handle_not_found(e):
    # Unknown path or known path with an unsupported method: both are
    # "no matching route" for callers.
    return make_error_response(NotFound())


def handle_payload_too_large(e):
    return make_error_response(PayloadTooLarge())


def handle_http_exception(e: HTTPException):
    """Any other werkzeug HTTP error keeps its status with a JSON body."""
    error = RelayError(message=e.name, status_code=e.code or 500, detail=e.description)
    error.code = (e.name or "HTTP_ERROR").upper().replace(" ", "_")
    return make_error_response(error)


def handle_internal_error(e: Exception):
    print(f"[ERROR] Unhandled exception: {type(e).__name__}: {e}")
    traceback.print_exc()
    return make_error_response(InternalFault(detail=f"{type(e).__name__}: {e}"))


def register_error_handlers(app):
    """Install JSON error handlers on the app."""
    app.register_error_handler(RelayError, handle_relay_error)
    app.register_error_handler(WerkzeugNotFound, handle_not_found)
    app.register_error_handler(MethodNotAllowed, handle_not_found)
    app.register_error_handler(RequestEntityTooLarge, handle_payload_too_large)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, handle_internal_error)
