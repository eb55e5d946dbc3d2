"""Phase table: named cycle-day ranges.

The table is a fixed partition of the cycle-day axis anchored at day 1::

    Menstrual   1-5
    Follicular  6-13
    Ovulation   14-16
    Luteal      17+

Luteal is open-ended, so any day from 17 upward is Luteal, including days past
a personal cycle length.  By default the nominal 28-day boundaries are used for
every cycle length; ``scaling="proportional"`` stretches the closed ranges by
``cycle_length / 28`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from src.cycle.dates import round_half_up

NOMINAL_CYCLE_LENGTH = 28


class CyclePhase(str, Enum):
    menstrual = "Menstrual"
    follicular = "Follicular"
    ovulation = "Ovulation"
    luteal = "Luteal"


@dataclass(frozen=True)
class PhaseRange:
    """One row of the phase table.

    Attributes:
        phase: Phase covered by this range.
        start: First cycle day of the range (1-indexed, inclusive).
        end:   Last cycle day (inclusive), or None for the open-ended range.
        label: Display label.
        color: Display colour as a hex string.
    """

    phase: CyclePhase
    start: int
    end: int | None
    label: str
    color: str

    def contains(self, day: int) -> bool:
        return day >= self.start and (self.end is None or day <= self.end)


PHASE_TABLE: tuple[PhaseRange, ...] = (
    PhaseRange(CyclePhase.menstrual, 1, 5, "Menstruation", "#ef4444"),
    PhaseRange(CyclePhase.follicular, 6, 13, "Follicular Phase", "#f472b6"),
    PhaseRange(CyclePhase.ovulation, 14, 16, "Ovulation", "#a855f7"),
    PhaseRange(CyclePhase.luteal, 17, None, "Luteal Phase", "#f59e0b"),
)


def phase_table(
    cycle_length: int = NOMINAL_CYCLE_LENGTH, scaling: str = "fixed"
) -> tuple[PhaseRange, ...]:
    """Return the phase ranges to use for a cycle length.

    Args:
        cycle_length: Personal cycle length in days.
        scaling:      'fixed' or 'proportional'.
    """
    if scaling == "fixed" or cycle_length == NOMINAL_CYCLE_LENGTH:
        return PHASE_TABLE
    if scaling != "proportional":
        raise ValueError(f"Unknown phase scaling {scaling!r}")

    ranges: list[PhaseRange] = []
    start = 1
    for row in PHASE_TABLE:
        if row.end is None:
            ranges.append(replace(row, start=start))
            break
        end = max(start, round_half_up(row.end * cycle_length / NOMINAL_CYCLE_LENGTH))
        ranges.append(replace(row, start=start, end=end))
        start = end + 1
    return tuple(ranges)


def phase_range_for_day(
    day: int, cycle_length: int = NOMINAL_CYCLE_LENGTH, scaling: str = "fixed"
) -> PhaseRange:
    """Return the table row covering ``day``.  Days below 1 count as day 1."""
    day = max(1, day)
    table = phase_table(cycle_length, scaling)
    for row in table:
        if row.contains(day):
            return row
    return table[-1]


def phase_for_day(
    day: int, cycle_length: int = NOMINAL_CYCLE_LENGTH, scaling: str = "fixed"
) -> CyclePhase:
    return phase_range_for_day(day, cycle_length, scaling).phase
