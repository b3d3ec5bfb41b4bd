"""Utility helpers for the relay."""

from .helpers import (
    is_nonempty_str,
    log_event,
    mask_value,
    now_iso,
    scrub_secrets,
)

__all__ = [
    "is_nonempty_str",
    "log_event",
    "mask_value",
    "now_iso",
    "scrub_secrets",
]
