"""
Utility functions for numeric validation, clamping and timestamps.

These are pure functions with no dependencies on other types.
"""

import math
from datetime import datetime, timezone
from numbers import Integral, Real
from time import time
from typing import Optional

# Numeric timestamps above this are taken to be milliseconds
MS_TIMESTAMP_THRESHOLD = 1e12


def wall_ms() -> int:
    """Get current wall clock timestamp in milliseconds."""
    return int(time() * 1000)


def is_finite_number(value: object) -> bool:
    """True for real, finite numbers. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    # Ints of any size are finite; math.isfinite overflows on huge ones
    if isinstance(value, Integral):
        return True
    return math.isfinite(value)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between min and max."""
    return max(min_val, min(max_val, value))


def clamp_probability(value: float) -> float:
    """Clamp a probability into [0, 1]."""
    return clamp(value, 0.0, 1.0)


def _parse_epoch(value: object) -> Optional[float]:
    """Numeric timestamp (seconds or ms) to seconds, or None."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not is_finite_number(value):
        return None
    if value > MS_TIMESTAMP_THRESHOLD:
        if isinstance(value, Integral):
            return value // 1000
        return value / 1000.0
    return value


def _parse_iso(value: str) -> Optional[float]:
    """ISO-8601 string to epoch seconds, or None. Naive times are UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def resolve_tick_time(updated_at: object, fallback_s: Optional[float] = None) -> int:
    """
    Resolve a feed timestamp into whole unix seconds.

    Accepts ISO-8601 strings, or numbers / numeric strings in seconds or
    milliseconds. Anything unparseable falls back to ``fallback_s``, or to
    the current wall clock when no fallback is given.

    Args:
        updated_at: Raw timestamp field from the price feed
        fallback_s: Seconds to use when updated_at is missing or invalid

    Returns:
        Unix timestamp in seconds (floored)
    """
    seconds: Optional[float] = None
    if updated_at is not None and updated_at != "":
        seconds = _parse_epoch(updated_at)
        if seconds is None and isinstance(updated_at, str):
            seconds = _parse_iso(updated_at)

    if seconds is None:
        if is_finite_number(fallback_s):
            seconds = fallback_s
        else:
            seconds = wall_ms() / 1000.0

    return math.floor(seconds)
