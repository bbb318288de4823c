"""Caffeine timing recommendations and flow impact assessment."""

from datetime import datetime, timedelta

from substance_engine.domain.synergy import SynergyReport
from substance_engine.domain.timing import FlowImpact, TimingRecommendation

LOW_CAFFEINE_MG = 30.0
MODERATE_CAFFEINE_MG = 75.0
HIGH_CAFFEINE_MG = 200.0
LOW_LEVEL_DOSE_MG = 200.0
MODERATE_LEVEL_DOSE_MG = 100.0
MIN_FLOW_MULTIPLIER = 0.8
MAX_FLOW_MULTIPLIER = 1.15
LATE_DOSE_WARNING = "Late-day caffeine may affect sleep. Consider a half dose or none."


def recommend_timing(  # noqa: PLR0913
    session_start: datetime,
    current_level: float,
    consumed_today: float,
    daily_limit: float,
    peak: timedelta,
    half_life: timedelta,
    sleep_cutoff_hour: int = 22,
) -> TimingRecommendation:
    """Recommend a dose taken one peak time before ``session_start``.

    The dose is tiered on the caffeine still active: up to 200mg below 30mg,
    up to 100mg below 75mg, nothing above. It never exceeds what is left of
    the daily limit. ``session_start`` should be in the user's local timezone
    for the late-day check.
    """
    remaining = max(0.0, daily_limit - consumed_today)
    dose = 0.0
    if current_level < LOW_CAFFEINE_MG:
        dose = min(LOW_LEVEL_DOSE_MG, remaining)
    elif current_level < MODERATE_CAFFEINE_MG:
        dose = min(MODERATE_LEVEL_DOSE_MG, remaining)

    cutoff_hour = sleep_cutoff_hour - half_life.total_seconds() / 3600
    session_hour = session_start.hour + session_start.minute / 60
    warning = None
    if dose > 0 and session_hour >= cutoff_hour:
        warning = LATE_DOSE_WARNING

    return TimingRecommendation(
        optimal_consume_time=session_start - peak,
        recommended_dose_mg=dose,
        current_active_mg=current_level,
        daily_remaining_mg=remaining,
        warning=warning,
    )


def assess_flow_impact(caffeine_level: float, synergy: SynergyReport) -> FlowImpact:
    """Score how the active caffeine and synergy affect flow capacity."""
    multiplier = 1.0
    notes: list[str] = []

    if caffeine_level < LOW_CAFFEINE_MG:
        notes.append("Low caffeine")
    elif MODERATE_CAFFEINE_MG <= caffeine_level <= HIGH_CAFFEINE_MG:
        multiplier += 0.05
        notes.append("Optimal caffeine range")
    elif caffeine_level > HIGH_CAFFEINE_MG:
        excess = (caffeine_level - HIGH_CAFFEINE_MG) / HIGH_CAFFEINE_MG
        penalty = min(0.15, excess * 0.10)
        multiplier -= penalty
        notes.append("High caffeine may impair focus")

    if synergy.state.active:
        multiplier += synergy.flow_bonus
        notes.append("Caffeine-theanine synergy active")

    return FlowImpact(
        multiplier=max(MIN_FLOW_MULTIPLIER, min(MAX_FLOW_MULTIPLIER, multiplier)),
        description=". ".join(notes),
    )
