"""
General helper utilities.

These functions are intentionally dependency-light so they can be reused
across services and routes without pulling in Flask app globals.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any


def now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def mask_value(val: Any, max_len: int = 400) -> str:
    try:
        s = json.dumps(val, ensure_ascii=False, default=str)
    except Exception:
        s = str(val)
    if len(s) > max_len:
        return s[:max_len] + "…"
    return s


def scrub_secrets(data: Any) -> Any:
    if isinstance(data, dict):
        cleaned = {}
        for k, v in data.items():
            key = str(k).lower()
            if any(t in key for t in ("key", "token", "secret", "auth")):
                cleaned[k] = "***"
            else:
                cleaned[k] = scrub_secrets(v)
        return cleaned
    if isinstance(data, list):
        return [scrub_secrets(x) for x in data]
    return data


def log_event(tag: str, event_name: str, data: dict) -> None:
    """Tagged one-line logging that avoids leaking secrets."""
    try:
        print(f"[{tag}] {event_name} :: {mask_value(scrub_secrets(data))}")
    except Exception as e:
        print(f"[{tag}] {event_name} :: failed to log ({e})")


def is_nonempty_str(value: Any) -> bool:
    """True for a string with at least one non-whitespace character."""
    return isinstance(value, str) and bool(value.strip())
