"""
Common utility functions used across services and routes.
"""

import math
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the database hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def round_half_up(value: float) -> int:
    """Round a non-negative number half up: 66.5 -> 67, 2.5 -> 3 (round() would give 2)."""
    return int(math.floor(value + 0.5))


def elapsed_seconds(start: datetime, now: datetime) -> float:
    return max((as_naive_utc(now) - as_naive_utc(start)).total_seconds(), 0.0)


def elapsed_whole_minutes(start: datetime, now: datetime) -> int:
    """Whole minutes since start; partial minutes are dropped."""
    return int(elapsed_seconds(start, now) // 60)
