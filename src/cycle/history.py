"""Period history reconciliation.

This module is the only writer of a profile's ``period_history``,
``last_period_date`` and ``cycle_length``.  Every mutator takes the current
profile, updates it in place, and returns it; persisting the result is the
caller's job.

Cycle length is re-estimated from the gaps between the most recent period
starts (up to 4 starts, so up to 3 gaps).  Gaps outside the plausible band
(15, 45) are discarded as data-entry mistakes or skipped cycles, and the
length only changes when at least one plausible gap survives.
"""

from __future__ import annotations

import logging
import statistics
from datetime import date

from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.dates import DateInput, days_between, round_half_up, to_date
from src.cycle.errors import InvalidCycleLengthError, NoActiveProfileError
from src.models.profile import DietPreference, Language, UserProfile

logger = logging.getLogger("sakhi.cycle.history")


def _sorted_unique_desc(dates: list[date]) -> list[date]:
    return sorted(set(dates), reverse=True)


def history_gaps(history: list[date], window: int = 4) -> list[int]:
    """Return the day gaps between adjacent starts among the ``window`` most recent.

    Args:
        history: Period start dates, most recent first.
        window:  How many of the most recent starts to consider.
    """
    recent = history[:window]
    return [abs(days_between(later, earlier)) for later, earlier in zip(recent, recent[1:])]


def estimate_cycle_length(
    history: list[date], config: CycleConfig | None = None
) -> int | None:
    """Estimate cycle length from recent history.

    Returns:
        The mean of the plausible gaps, rounded half-up, or None when fewer
        than two starts are known or every gap is an outlier.
    """
    hc = (config or get_cycle_config()).history
    gaps = history_gaps(history, hc.estimation_window)
    plausible = [g for g in gaps if hc.plausible_gap(g)]

    if len(plausible) < len(gaps):
        logger.debug(
            "Discarded %d implausible gap(s): %s",
            len(gaps) - len(plausible),
            [g for g in gaps if not hc.plausible_gap(g)],
        )
    if not plausible:
        return None
    return round_half_up(statistics.mean(plausible))


def create_profile(
    last_period_date: DateInput,
    diet_preference: DietPreference | str = DietPreference.vegetarian,
    language: Language | str = Language.english,
    name: str | None = None,
    config: CycleConfig | None = None,
) -> UserProfile:
    """Build the profile recorded when onboarding completes."""
    cfg = config or get_cycle_config()
    start = to_date(last_period_date)
    profile = UserProfile(
        name=name,
        last_period_date=start,
        cycle_length=cfg.cycle.default_length,
        period_history=[start],
        symptom_history=[],
        diet_preference=DietPreference(diet_preference),
        language=Language(language),
        onboarding_complete=True,
    )
    logger.info("Created profile with last period %s", start.isoformat())
    return profile


def record_period_start(
    profile: UserProfile | None,
    new_date: DateInput,
    config: CycleConfig | None = None,
) -> UserProfile:
    """Record a period start and reconcile the profile's history.

    The date may be newer or older than the current last period (a missed
    date can be backfilled).  Recording a date that is already known leaves
    the history unchanged but still re-derives ``last_period_date`` and
    ``cycle_length``, so repeating the call is idempotent.

    Args:
        profile:  The active profile (mutated in place).
        new_date: Period start as a date or ISO ``YYYY-MM-DD`` string.
        config:   Engine config; defaults to the global singleton.

    Returns:
        The same profile instance, updated.

    Raises:
        NoActiveProfileError: If ``profile`` is None.
        ValueError:           If ``new_date`` is not an ISO date string.
    """
    if profile is None:
        raise NoActiveProfileError("record a period start")

    start = to_date(new_date)
    history = list(profile.period_history)
    if start not in history:
        history.append(start)
    profile.period_history = _sorted_unique_desc(history)
    profile.last_period_date = profile.period_history[0]

    estimate = estimate_cycle_length(profile.period_history, config)
    if estimate is not None and estimate != profile.cycle_length:
        logger.info(
            "Cycle length re-estimated: %d → %d days", profile.cycle_length, estimate
        )
        profile.cycle_length = estimate

    logger.info(
        "Recorded period start %s (history=%d, last=%s)",
        start.isoformat(),
        len(profile.period_history),
        profile.last_period_date.isoformat(),
    )
    return profile


def apply_settings(
    profile: UserProfile | None,
    last_period_date: DateInput | None = None,
    cycle_length: int | None = None,
    diet_preference: DietPreference | str | None = None,
    language: Language | str | None = None,
    name: str | None = None,
    config: CycleConfig | None = None,
) -> UserProfile:
    """Apply a settings-form edit to the profile.

    A changed last period date is treated as a correction of the most recent
    history entry, not as a new period.  A manual cycle length must fall in
    the configured band.  Fields left as None are unchanged.

    Raises:
        NoActiveProfileError:    If ``profile`` is None.
        InvalidCycleLengthError: If ``cycle_length`` is out of range.  Nothing
                                 is modified in that case.
    """
    if profile is None:
        raise NoActiveProfileError("update settings")

    cc = (config or get_cycle_config()).cycle
    if cycle_length is not None and not cc.accepts(cycle_length):
        raise InvalidCycleLengthError(cycle_length, cc.min_length, cc.max_length)

    if last_period_date is not None:
        corrected = to_date(last_period_date)
        if corrected != profile.last_period_date:
            history = list(profile.period_history) or [profile.last_period_date]
            history[0] = corrected
            profile.period_history = _sorted_unique_desc(history)
            profile.last_period_date = profile.period_history[0]
            logger.info("Corrected last period date to %s", corrected.isoformat())

    if cycle_length is not None:
        profile.cycle_length = int(cycle_length)
    if diet_preference is not None:
        profile.diet_preference = DietPreference(diet_preference)
    if language is not None:
        profile.language = Language(language)
    if name is not None:
        profile.name = name
    return profile
