"""Cycle status calculator.

Turns a remembered last period start and a cycle length into the user's
current cycle day, phase, and next predicted period.  Pure: no I/O, no
mutation, and deterministic for the same inputs and the same ``as_of_date``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.dates import DateInput, days_between, to_date
from src.cycle.phases import CyclePhase, phase_for_day


@dataclass(frozen=True)
class CycleStatus:
    """Derived status for one day.  Never persisted.

    Attributes:
        day:              Current cycle day (1-indexed, always >= 1).
        phase:            Phase for ``day``.
        next_period_date: Predicted next period start, never before today.
        days_until_next:  Whole days from today to ``next_period_date``.
    """

    day: int
    phase: CyclePhase
    next_period_date: date
    days_until_next: int


def cycle_day(
    last_period_date: DateInput,
    cycle_length: int,
    as_of_date: DateInput | None = None,
    mode: str = "wrapped",
) -> int:
    """Return the cycle day for ``as_of_date`` (today by default).

    The start date itself is day 1.  A last period date in the future
    yields day 1.  In ``wrapped`` mode the count repeats every
    ``cycle_length`` days; in ``linear`` mode it keeps climbing.
    """
    start = to_date(last_period_date)
    today = to_date(as_of_date) if as_of_date is not None else date.today()
    diff = days_between(start, today)
    if diff < 0:
        return 1
    if mode == "wrapped":
        return diff % cycle_length + 1
    if mode == "linear":
        return diff + 1
    raise ValueError(f"Unknown cycle day mode {mode!r}")


def next_period_after(last_period_date: date, cycle_length: int, today: date) -> date:
    """Project the next period start forward until it is not in the past."""
    step = timedelta(days=cycle_length)
    next_date = last_period_date + step
    while next_date < today:
        next_date += step
    return next_date


def compute_status(
    last_period_date: DateInput,
    cycle_length: int,
    as_of_date: DateInput | None = None,
    config: CycleConfig | None = None,
) -> CycleStatus:
    """Compute the cycle status for ``as_of_date`` (today by default).

    Args:
        last_period_date: Most recent known period start.
        cycle_length:     Cycle length in days (> 0).
        as_of_date:       Reference day; defaults to ``date.today()``.
        config:           Engine config; defaults to the global singleton.

    Raises:
        ValueError: If ``cycle_length`` is not positive or a date string is
                    not ISO formatted.  Validating input is the caller's job.
    """
    if cycle_length <= 0:
        raise ValueError(f"cycle_length must be positive, got {cycle_length}")

    cfg = (config or get_cycle_config()).cycle
    start = to_date(last_period_date)
    today = to_date(as_of_date) if as_of_date is not None else date.today()

    day = cycle_day(start, cycle_length, today, mode=cfg.day_mode)
    next_date = next_period_after(start, cycle_length, today)

    return CycleStatus(
        day=day,
        phase=phase_for_day(day, cycle_length, cfg.phase_scaling),
        next_period_date=next_date,
        days_until_next=days_between(today, next_date),
    )


get_status = compute_status
