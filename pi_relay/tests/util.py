"""
Test helpers: a fake Pi API and config builders.

FakePiApi is patched over requests.request so tests can assert exactly
which upstream calls were (or were not) made.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

from pi_relay.config import Config

PI_BASE = "https://pi.test/v2"
FRONTEND = "https://app.example.com"
API_KEY = "test-server-key"


@dataclass
class UpstreamCall:
    method: str
    path: str
    headers: Dict[str, str]
    json: Any
    timeout: Optional[float]


def fake_response(status: int = 200, payload: Any = None) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    r.ok = 200 <= status < 400
    if payload is None:
        r.json.side_effect = ValueError("No JSON object could be decoded")
        r.text = ""
    else:
        r.json.return_value = payload
        r.text = json.dumps(payload)
    return r


class FakePiApi:
    """Callable stand-in for requests.request that records every call."""

    def __init__(self, base: str = PI_BASE):
        self.base = base
        self.routes: Dict[tuple, tuple] = {}
        self.calls: List[UpstreamCall] = []

    def on(self, method: str, path: str, status: int = 200, payload: Any = None, exc: BaseException = None):
        self.routes[(method, path)] = (status, payload, exc)
        return self

    def user(self, uid: str = "u1", username: str = "pioneer", wallet: Optional[str] = "GABC"):
        # /me is keyed by path only, so one verified user per test
        return self.on("GET", "/me", payload={"uid": uid, "username": username, "wallet_address": wallet})

    def __call__(self, method, url, headers=None, json=None, timeout=None, **kwargs):
        assert url.startswith(self.base), url
        path = url[len(self.base):]
        self.calls.append(UpstreamCall(method, path, dict(headers or {}), json, timeout))

        if (method, path) not in self.routes:
            return fake_response(404, {"error": "not_found", "error_message": "No route in fake Pi API"})

        status, payload, exc = self.routes[(method, path)]
        if exc is not None:
            raise exc
        return fake_response(status, payload)

    @property
    def paths(self) -> List[str]:
        return [c.path for c in self.calls]

    def calls_to(self, path: str) -> List[UpstreamCall]:
        return [c for c in self.calls if c.path == path]


def make_config(**overrides) -> Config:
    values = dict(
        FLASK_ENV="production",
        DIAGNOSTICS_ENABLED=False,
        PORT=8080,
        HOST="127.0.0.1",
        MAX_BODY_BYTES=10 * 1024,
        FRONTEND_URL=FRONTEND,
        PI_API_KEY=API_KEY,
        PI_NETWORK="mainnet",
        PI_API_URL_MAINNET=PI_BASE,
        PI_API_URL_TESTNET="https://pi-testnet.test/v2",
        PI_API_TIMEOUT=5.0,
    )
    values.update(overrides)
    return Config(**values)


def bearer(token: str = "abc") -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
