"""Tests for period history reconciliation and profile lifecycle helpers."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.cycle.config_loader import CycleConfig
from src.cycle.errors import InvalidCycleLengthError, NoActiveProfileError
from src.cycle.history import (
    apply_settings,
    create_profile,
    estimate_cycle_length,
    history_gaps,
    record_period_start,
)
from src.cycle.tests.conftest import LAST_PERIOD, make_profile, starts_with_gaps
from src.models.profile import DietPreference, Language, UserProfile


def assert_strictly_descending(dates: list[date]) -> None:
    assert all(a > b for a, b in zip(dates, dates[1:])), dates


# ---------------------------------------------------------------------------
# Cycle length estimation
# ---------------------------------------------------------------------------


class TestEstimateCycleLength:
    def test_outlier_gap_is_discarded(self, cycle_config: CycleConfig) -> None:
        starts = starts_with_gaps(LAST_PERIOD, [120, 28, 28])
        history = sorted(starts, reverse=True)
        assert history_gaps(history) == [28, 28, 120]
        assert estimate_cycle_length(history, cycle_config) == 28

    def test_single_date_gives_no_estimate(self, cycle_config: CycleConfig) -> None:
        assert estimate_cycle_length([LAST_PERIOD], cycle_config) is None

    def test_only_four_most_recent_starts_used(self, cycle_config: CycleConfig) -> None:
        starts = starts_with_gaps(LAST_PERIOD, [20, 30, 30, 30])
        history = sorted(starts, reverse=True)
        assert estimate_cycle_length(history, cycle_config) == 30

    @pytest.mark.parametrize(
        ("gap", "expected"),
        [(15, None), (16, 16), (44, 44), (45, None)],
    )
    def test_plausible_band_is_exclusive(
        self, cycle_config: CycleConfig, gap: int, expected: int | None
    ) -> None:
        history = [LAST_PERIOD + timedelta(days=gap), LAST_PERIOD]
        assert estimate_cycle_length(history, cycle_config) == expected

    def test_mean_rounds_half_up(self, cycle_config: CycleConfig) -> None:
        history = sorted(starts_with_gaps(LAST_PERIOD, [28, 29]), reverse=True)
        assert estimate_cycle_length(history, cycle_config) == 29

    def test_all_gaps_implausible(self, cycle_config: CycleConfig) -> None:
        history = sorted(starts_with_gaps(LAST_PERIOD, [3, 90]), reverse=True)
        assert estimate_cycle_length(history, cycle_config) is None


# ---------------------------------------------------------------------------
# Recording period starts
# ---------------------------------------------------------------------------


class TestRecordPeriodStart:
    def test_new_date_thirty_days_later_sets_length(
        self, profile: UserProfile, cycle_config: CycleConfig
    ) -> None:
        record_period_start(profile, LAST_PERIOD + timedelta(days=30), cycle_config)
        assert profile.cycle_length == 30
        assert profile.last_period_date == date(2024, 1, 31)
        assert profile.period_history == [date(2024, 1, 31), LAST_PERIOD]

    def test_single_history_date_keeps_length(
        self, profile: UserProfile, cycle_config: CycleConfig
    ) -> None:
        record_period_start(profile, LAST_PERIOD, cycle_config)
        assert profile.cycle_length == 28
        assert profile.period_history == [LAST_PERIOD]

    def test_repeated_call_is_idempotent(self, cycle_config: CycleConfig) -> None:
        once = make_profile([LAST_PERIOD])
        twice = make_profile([LAST_PERIOD])
        record_period_start(once, "2024-01-29", cycle_config)
        record_period_start(twice, "2024-01-29", cycle_config)
        record_period_start(twice, "2024-01-29", cycle_config)
        assert once.model_dump() == twice.model_dump()
        assert twice.period_history.count(date(2024, 1, 29)) == 1

    def test_outlier_rejected_across_successive_records(self, cycle_config: CycleConfig) -> None:
        starts = starts_with_gaps(LAST_PERIOD, [120, 28, 28])
        p = make_profile([starts[0]], cycle_length=31)

        record_period_start(p, starts[1], cycle_config)
        assert p.cycle_length == 31  # only gap is 120

        record_period_start(p, starts[2], cycle_config)
        record_period_start(p, starts[3], cycle_config)
        assert p.cycle_length == 28

    def test_backfilled_older_date_keeps_latest_as_last(self, cycle_config: CycleConfig) -> None:
        p = make_profile([date(2024, 3, 1)])
        record_period_start(p, "2024-02-01", cycle_config)
        assert p.last_period_date == date(2024, 3, 1)
        assert p.period_history == [date(2024, 3, 1), date(2024, 2, 1)]
        assert p.cycle_length == 29  # leap-year February

    def test_history_stays_sorted_and_unique(self, cycle_config: CycleConfig) -> None:
        p = make_profile([date(2024, 2, 1)])
        for d in ["2024-04-01", "2024-01-03", "2024-03-02", "2024-02-01", "2024-01-03"]:
            record_period_start(p, d, cycle_config)
            assert_strictly_descending(p.period_history)
            assert p.period_history[0] == p.last_period_date
        assert len(p.period_history) == 4

    def test_returns_same_profile(self, profile: UserProfile, cycle_config: CycleConfig) -> None:
        assert record_period_start(profile, "2024-01-30", cycle_config) is profile

    def test_missing_profile_raises(self, cycle_config: CycleConfig) -> None:
        with pytest.raises(NoActiveProfileError):
            record_period_start(None, "2024-01-30", cycle_config)

    def test_malformed_date_raises_before_mutation(
        self, profile: UserProfile, cycle_config: CycleConfig
    ) -> None:
        before = profile.model_dump()
        with pytest.raises(ValueError):
            record_period_start(profile, "30/01/2024", cycle_config)
        assert profile.model_dump() == before


# ---------------------------------------------------------------------------
# Onboarding and settings edits
# ---------------------------------------------------------------------------


class TestCreateProfile:
    def test_onboarding_defaults(self, cycle_config: CycleConfig) -> None:
        p = create_profile("2024-01-01", "non-vegetarian", "hindi", config=cycle_config)
        assert p.last_period_date == LAST_PERIOD
        assert p.period_history == [LAST_PERIOD]
        assert p.symptom_history == []
        assert p.cycle_length == cycle_config.cycle.default_length
        assert p.diet_preference == DietPreference.non_vegetarian
        assert p.language == Language.hindi
        assert p.onboarding_complete

    def test_unknown_language_rejected(self, cycle_config: CycleConfig) -> None:
        with pytest.raises(ValueError):
            create_profile("2024-01-01", language="klingon", config=cycle_config)


class TestApplySettings:
    def test_corrected_date_replaces_most_recent_entry(self, cycle_config: CycleConfig) -> None:
        p = make_profile([date(2024, 3, 1), date(2024, 2, 1)], cycle_length=29)
        apply_settings(p, last_period_date="2024-03-03", config=cycle_config)
        assert p.period_history == [date(2024, 3, 3), date(2024, 2, 1)]
        assert p.last_period_date == date(2024, 3, 3)
        assert p.cycle_length == 29

    def test_correction_to_older_date_resorts(self, cycle_config: CycleConfig) -> None:
        p = make_profile([date(2024, 3, 1), date(2024, 2, 1)])
        apply_settings(p, last_period_date="2024-01-15", config=cycle_config)
        assert p.period_history == [date(2024, 2, 1), date(2024, 1, 15)]
        assert p.last_period_date == date(2024, 2, 1)

    def test_correction_onto_existing_date_dedupes(self, cycle_config: CycleConfig) -> None:
        p = make_profile([date(2024, 3, 1), date(2024, 2, 1)])
        apply_settings(p, last_period_date=date(2024, 2, 1), config=cycle_config)
        assert p.period_history == [date(2024, 2, 1)]

    @pytest.mark.parametrize("length", [20, 45])
    def test_band_edges_accepted(self, profile: UserProfile, cycle_config: CycleConfig, length: int) -> None:
        apply_settings(profile, cycle_length=length, config=cycle_config)
        assert profile.cycle_length == length

    @pytest.mark.parametrize("length", [0, 19, 46])
    def test_out_of_band_length_rejected_without_changes(
        self, profile: UserProfile, cycle_config: CycleConfig, length: int
    ) -> None:
        before = profile.model_dump()
        with pytest.raises(InvalidCycleLengthError):
            apply_settings(
                profile,
                last_period_date="2024-01-03",
                cycle_length=length,
                config=cycle_config,
            )
        assert profile.model_dump() == before

    def test_preferences_updated(self, profile: UserProfile, cycle_config: CycleConfig) -> None:
        apply_settings(
            profile,
            diet_preference="non-vegetarian",
            language=Language.tamil,
            name="Asha",
            config=cycle_config,
        )
        assert profile.diet_preference == DietPreference.non_vegetarian
        assert profile.language == Language.tamil
        assert profile.name == "Asha"
        assert profile.period_history == [LAST_PERIOD]

    def test_missing_profile_raises(self, cycle_config: CycleConfig) -> None:
        with pytest.raises(NoActiveProfileError):
            apply_settings(None, cycle_length=30, config=cycle_config)
