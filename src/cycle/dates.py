"""Calendar-date helpers shared by the cycle engine.

Every engine input is reduced to a plain ``datetime.date`` before any
arithmetic, so day counts are calendar-day differences and never depend on
time of day or timezone.
"""

from __future__ import annotations

import math
from datetime import date, datetime

DateInput = date | datetime | str


def to_date(value: DateInput) -> date:
    """Normalize a date, datetime, or ISO ``YYYY-MM-DD`` string to a date.

    Raises:
        ValueError: If a string is not an ISO calendar date.
        TypeError:  For any other input type.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise TypeError(f"Expected a date or ISO date string, got {type(value).__name__}")


def days_between(start: date, end: date) -> int:
    """Signed whole days from ``start`` to ``end``."""
    return (end - start).days


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3)."""
    return math.floor(value + 0.5)
