"""
Low-level Pi Platform API calls.

Two credentials are used against the same base URL:
- Bearer <user access token>: only for GET /me (identity verification)
- Key <PI_API_KEY>: every server-to-server call (balances, payments)

No retries: a single failed call raises UpstreamError immediately.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from pi_relay.config import get_config


class UpstreamError(Exception):
    """
    Raised when a Pi API call fails.

    status_code is None for transport failures (connection error, timeout,
    undecodable body); message is the upstream "message"/"error" field if any.
    """

    def __init__(
        self,
        operation: str,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
        payload: Any = None,
        cause: Optional[BaseException] = None,
    ):
        self.operation = operation
        self.status_code = status_code
        self.message = message
        self.payload = payload
        self.cause = cause
        super().__init__(self.describe())

    def describe(self) -> str:
        """One-line description for server logs (never includes credentials)."""
        if self.status_code is None:
            return f"{self.operation} failed: {type(self.cause).__name__ if self.cause else 'error'}: {self.cause}"
        body = self.payload if self.payload is not None else ""
        return f"{self.operation} -> {self.status_code}: {str(body)[:500]}"


def _service_headers() -> Dict[str, str]:
    """Headers for server-to-server calls (service credential)."""
    return {
        "Authorization": f"Key {get_config().PI_API_KEY}",
        "Content-Type": "application/json",
    }


def _bearer_headers(access_token: str) -> Dict[str, str]:
    """Headers for calls made with the end user's own access token."""
    return {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json",
    }


def quote_segment(value: str) -> str:
    """Quote a caller-supplied value for use as a single URL path segment."""
    return quote(str(value), safe="")


def _extract_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        for key in ("message", "error_message"):
            val = payload.get(key)
            if isinstance(val, str) and val:
                return val
    return None


def _request(method: str, path: str, headers: Dict[str, str], payload: Optional[dict] = None) -> dict:
    cfg = get_config()
    url = f"{cfg.PI_API_URL}{path}"
    operation = f"{method} {path}"

    try:
        r = requests.request(method, url, headers=headers, json=payload, timeout=cfg.PI_API_TIMEOUT)
    except requests.RequestException as e:
        raise UpstreamError(operation, cause=e) from e

    if not r.ok:
        try:
            body = r.json()
        except ValueError:
            body = r.text[:500]
        raise UpstreamError(operation, status_code=r.status_code, message=_extract_message(body), payload=body)

    try:
        data = r.json()
    except ValueError as e:
        raise UpstreamError(operation, cause=e) from e

    if not isinstance(data, dict):
        raise UpstreamError(operation, message=None, payload=data, cause=TypeError("expected JSON object"))
    return data


def pi_get(path: str) -> dict:
    return _request("GET", path, _service_headers())


def pi_post(path: str, payload: Optional[dict] = None) -> dict:
    return _request("POST", path, _service_headers(), payload if payload is not None else {})


def pi_get_as_user(path: str, access_token: str) -> dict:
    return _request("GET", path, _bearer_headers(access_token))
