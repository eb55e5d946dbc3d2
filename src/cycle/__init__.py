"""Cycle engine for Sakhi.

Turns a remembered last period start plus a rolling history of period dates
and symptom logs into the current cycle day and phase, a predicted next
period, and an updated cycle length estimate.  The hosting application owns
the profile and passes it into every call; nothing here keeps state between
calls apart from the cached configuration.

Modules:
    phases    — Phase table (cycle-day ranges → named phases)
    status    — Cycle status calculator (day, phase, next period)
    history   — Period history reconciler and cycle length estimation
    symptoms  — Cycle-day-stamped symptom logging
    insights  — Localized phase tips
"""

from src.cycle.errors import CycleEngineError, InvalidCycleLengthError, NoActiveProfileError
from src.cycle.history import (
    apply_settings,
    create_profile,
    estimate_cycle_length,
    record_period_start,
)
from src.cycle.phases import PHASE_TABLE, CyclePhase, phase_for_day
from src.cycle.status import CycleStatus, compute_status, cycle_day, get_status
from src.cycle.symptoms import log_symptom, recent_symptoms

__all__ = [
    "CycleEngineError",
    "CyclePhase",
    "CycleStatus",
    "InvalidCycleLengthError",
    "NoActiveProfileError",
    "PHASE_TABLE",
    "apply_settings",
    "compute_status",
    "create_profile",
    "cycle_day",
    "estimate_cycle_length",
    "get_status",
    "log_symptom",
    "phase_for_day",
    "record_period_start",
    "recent_symptoms",
]
