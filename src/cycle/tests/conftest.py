"""Shared fixtures for cycle engine tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.cycle.config_loader import CycleConfig, _validate_and_build, load_cycle_config
from src.models.profile import UserProfile

# Canonical dates used across tests
LAST_PERIOD = date(2024, 1, 1)
TEST_DATE = date(2024, 1, 6)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the bundled cycle config for tests."""
    return load_cycle_config()


@pytest.fixture
def linear_config() -> CycleConfig:
    """Config counting cycle days without wrapping."""
    return _validate_and_build({"cycle": {"day_mode": "linear"}})


@pytest.fixture
def proportional_config() -> CycleConfig:
    return _validate_and_build({"cycle": {"phase_scaling": "proportional"}})


# ---------------------------------------------------------------------------
# Profile helpers
# ---------------------------------------------------------------------------


def make_profile(history: list[date], cycle_length: int = 28) -> UserProfile:
    """Build a profile whose history is ``history`` (any order)."""
    ordered = sorted(set(history), reverse=True)
    return UserProfile(
        last_period_date=ordered[0],
        cycle_length=cycle_length,
        period_history=ordered,
    )


def starts_with_gaps(first: date, gaps: list[int]) -> list[date]:
    """Return period starts beginning at ``first`` separated by ``gaps`` (oldest first)."""
    starts = [first]
    for gap in gaps:
        starts.append(starts[-1] + timedelta(days=gap))
    return starts


@pytest.fixture
def profile() -> UserProfile:
    """A freshly onboarded profile with one known period start."""
    return make_profile([LAST_PERIOD])
