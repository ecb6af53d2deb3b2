"""
Shared utility functions for the task list service.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timedelta, timezone


_DURATION_UNITS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
}

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique ID with optional prefix.

    Args:
        prefix: Optional prefix (e.g., "user", "task", "tok")

    Returns:
        A unique ID like "task_a1b2c3d4e5f6"
    """
    uid = uuid.uuid4().hex[:12]
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def parse_duration(value: str | int) -> timedelta:
    """
    Parse a token lifetime like "3600", "15m", "24h" or "7d".

    A bare number is a count of seconds.

    Raises:
        ValueError: The value is not a positive duration.
    """
    if isinstance(value, int):
        seconds = value
    else:
        match = _DURATION_RE.match(value)
        if not match:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        seconds = int(amount) * _DURATION_UNITS[(unit or "s").lower()]

    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=seconds)
