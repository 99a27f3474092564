"""Formatting and conversion utilities.

Minute coercion, countdown formatting, percentages for notifications.
"""

from __future__ import annotations

import re
from typing import Any

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def clamp_minutes(value: Any, lo: int = 1, hi: int = 180) -> int:
    """Coerce user input to whole minutes in [lo, hi].

    Strings are read up to the first non-digit ("25.5" → 25, "30min" → 30).
    Input with no leading integer falls back to ``lo``.
    """
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return lo
        n = int(match.group(1))
    else:
        try:
            n = int(value)
        except (TypeError, ValueError, OverflowError):
            return lo
    return max(lo, min(n, hi))


def format_time(seconds: int) -> str:
    """Format a countdown as m:ss."""
    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m}:{s:02d}"


def format_percent(value: float) -> str:
    """Format a float as a rounded percentage."""
    return f"{round(value * 100)}%"
