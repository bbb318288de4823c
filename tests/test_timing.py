"""Tests for timing recommendations and flow impact."""

from datetime import UTC, datetime, timedelta

import pytest

from substance_engine.services.synergy import SynergyEvaluator
from substance_engine.services.timing import (
    LATE_DOSE_WARNING,
    assess_flow_impact,
    recommend_timing,
)

AFTERNOON = datetime(2026, 3, 2, 14, 0, tzinfo=UTC)
EVENING = datetime(2026, 3, 2, 18, 0, tzinfo=UTC)


def _recommend(session_start: datetime, current: float, consumed: float = 0.0):
    return recommend_timing(
        session_start=session_start,
        current_level=current,
        consumed_today=consumed,
        daily_limit=400.0,
        peak=timedelta(minutes=45),
        half_life=timedelta(hours=5),
    )


def test_consume_one_peak_time_before_session() -> None:
    recommendation = _recommend(AFTERNOON, current=0.0)

    assert recommendation.optimal_consume_time == AFTERNOON - timedelta(minutes=45)
    assert recommendation.recommended_dose_mg == 200.0
    assert recommendation.daily_remaining_mg == 400.0
    assert recommendation.warning is None


@pytest.mark.parametrize(
    ("current", "dose"),
    [(0.0, 200.0), (29.9, 200.0), (30.0, 100.0), (74.9, 100.0), (75.0, 0.0)],
)
def test_dose_tiers_on_current_level(current: float, dose: float) -> None:
    assert _recommend(AFTERNOON, current).recommended_dose_mg == dose


def test_dose_capped_by_remaining_allowance() -> None:
    near_limit = _recommend(AFTERNOON, current=0.0, consumed=350.0)
    over_limit = _recommend(AFTERNOON, current=0.0, consumed=500.0)

    assert near_limit.recommended_dose_mg == 50.0
    assert near_limit.daily_remaining_mg == 50.0
    assert over_limit.recommended_dose_mg == 0.0
    assert over_limit.daily_remaining_mg == 0.0


def test_late_session_warns_only_when_a_dose_is_suggested() -> None:
    assert _recommend(EVENING, current=0.0).warning == LATE_DOSE_WARNING
    assert _recommend(EVENING, current=80.0).warning is None


def test_flow_low_caffeine() -> None:
    report = SynergyEvaluator().report(10.0, 0.0)

    impact = assess_flow_impact(10.0, report)

    assert impact.multiplier == 1.0
    assert impact.description == "Low caffeine"


def test_flow_neutral_between_low_and_optimal() -> None:
    impact = assess_flow_impact(50.0, SynergyEvaluator().report(50.0, 0.0))

    assert impact.multiplier == 1.0
    assert impact.description == ""


def test_flow_optimal_caffeine_range() -> None:
    impact = assess_flow_impact(100.0, SynergyEvaluator().report(100.0, 0.0))

    assert impact.multiplier == pytest.approx(1.05)
    assert impact.description == "Optimal caffeine range"


@pytest.mark.parametrize(("caffeine", "multiplier"), [(300.0, 0.95), (1000.0, 0.85)])
def test_flow_penalizes_high_caffeine(caffeine: float, multiplier: float) -> None:
    impact = assess_flow_impact(caffeine, SynergyEvaluator().report(caffeine, 0.0))

    assert impact.multiplier == pytest.approx(multiplier)
    assert impact.description == "High caffeine may impair focus"


def test_flow_synergy_bonus_is_capped() -> None:
    impact = assess_flow_impact(100.0, SynergyEvaluator().report(100.0, 200.0))

    assert impact.multiplier == 1.15
    assert impact.description == (
        "Optimal caffeine range. Caffeine-theanine synergy active"
    )
