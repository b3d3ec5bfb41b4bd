"""
Health check routes.

GET /api/health - liveness probe, no auth, never touches the Pi API.
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from pi_relay import __version__
from pi_relay.config import get_config
from pi_relay.utils.helpers import now_iso

bp = Blueprint("health", __name__)


@bp.route("/health", methods=["GET"])
def health():
    cfg = get_config()
    return jsonify({
        "status": "operational",
        "version": __version__,
        "environment": cfg.FLASK_ENV,
        "network": cfg.PI_NETWORK,
        "timestamp": now_iso(),
    })
