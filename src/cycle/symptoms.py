"""Symptom logging.

Each entry is stamped with the cycle day it was logged on, computed from the
profile's last period date and cycle length at that moment.  The stamp is
never recomputed, so later edits to the cycle length leave old entries alone.
"""

from __future__ import annotations

import logging
from datetime import date

from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.dates import DateInput, to_date
from src.cycle.errors import NoActiveProfileError
from src.cycle.status import cycle_day
from src.models.profile import SymptomEntry, UserProfile

logger = logging.getLogger("sakhi.cycle.symptoms")


def log_symptom(
    profile: UserProfile | None,
    symptom: str,
    as_of_date: DateInput | None = None,
    config: CycleConfig | None = None,
) -> SymptomEntry:
    """Log a symptom for today on the profile.

    Args:
        profile:    The active profile (its symptom history is mutated).
        symptom:    Free-text symptom label, e.g. "Cramps".
        as_of_date: Day the symptom occurred; defaults to today.
        config:     Engine config; defaults to the global singleton.

    Returns:
        The created entry.  The caller persists the profile.

    Raises:
        NoActiveProfileError: If ``profile`` is None.
    """
    if profile is None:
        raise NoActiveProfileError("log a symptom")

    cfg = config or get_cycle_config()
    today = to_date(as_of_date) if as_of_date is not None else date.today()
    day = cycle_day(
        profile.last_period_date,
        profile.cycle_length,
        today,
        mode=cfg.cycle.day_mode,
    )
    entry = SymptomEntry(date=today, symptom=symptom, cycle_day=day)

    # Newest first; the stable sort keeps this entry ahead of same-day ones.
    history = [entry, *profile.symptom_history]
    history.sort(key=lambda e: e.date, reverse=True)
    profile.symptom_history = history

    logger.info("Logged symptom %r on %s (cycle day %d)", entry.symptom, today, day)
    return entry


def recent_symptoms(
    profile: UserProfile, limit: int | None = None, config: CycleConfig | None = None
) -> tuple[list[SymptomEntry], int]:
    """Return the most recent entries and how many older ones were left out."""
    if limit is None:
        limit = (config or get_cycle_config()).symptoms.recent_limit
    history = profile.symptom_history
    return history[:limit], max(0, len(history) - limit)
