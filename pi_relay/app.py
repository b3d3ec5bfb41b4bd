"""Application factory.

Builds the Flask app: CORS, security headers, access log, blueprints and
JSON error handlers. Refuses to build when required settings are missing.
"""

from __future__ import annotations

import time
from typing import Optional

from flask import Flask, g, request
from flask_cors import CORS

from pi_relay.config import Config, config as default_config
from pi_relay.routes import register_blueprints
from pi_relay.utils.error_handlers import register_error_handlers


def _content_security_policy(cfg: Config) -> str:
    return "; ".join([
        "default-src 'self'",
        f"script-src 'self' {cfg.PI_SDK_URL}",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https://minepi.com",
        f"connect-src 'self' {cfg.PI_API_URL}",
    ])


def create_app(cfg: Optional[Config] = None) -> Flask:
    cfg = (cfg or default_config).require()
    cfg.log_summary()

    app = Flask(__name__)
    app.config["RELAY_CONFIG"] = cfg
    app.config["MAX_CONTENT_LENGTH"] = cfg.MAX_BODY_BYTES

    CORS(
        app,
        resources={r"/api/*": {"origins": cfg.ALLOWED_ORIGINS}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST"],
    )

    csp = _content_security_policy(cfg)

    @app.before_request
    def _identity_default():
        g.pi_user = None
        g.identity_id = None
        g.request_started = time.monotonic()

    @app.after_request
    def _security_headers(response):
        headers = response.headers
        headers.setdefault("Content-Security-Policy", csp)
        headers.setdefault("X-Content-Type-Options", "nosniff")
        headers.setdefault("X-Frame-Options", "DENY")
        headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if cfg.IS_PROD:
            headers.setdefault("Strict-Transport-Security", "max-age=15552000; includeSubDomains")
        return response

    @app.after_request
    def _access_log(response):
        started = getattr(g, "request_started", None)
        elapsed_ms = (time.monotonic() - started) * 1000 if started else 0.0
        print(
            f"[HTTP] {request.remote_addr} {request.method} {request.path} "
            f"{response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    register_blueprints(app)
    register_error_handlers(app)

    return app
