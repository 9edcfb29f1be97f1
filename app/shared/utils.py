"""Shared utility functions."""

from __future__ import annotations

from datetime import datetime, time, timezone


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_clock(value: time) -> str:
    """Render time-of-day as HH:MM:SS, the wire format of slot times."""
    return value.strftime("%H:%M:%S")
