"""Aggregation of decayed intakes into per-substance active levels."""

import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta

from substance_engine.domain.intake import IntakeEvent
from substance_engine.domain.levels import LevelPoint
from substance_engine.domain.substances import SubstanceProfile, SubstanceType
from substance_engine.services.decay import active_amount


def active_level(
    substance_type: SubstanceType,
    events: Iterable[IntakeEvent],
    profiles: Mapping[SubstanceType, SubstanceProfile],
    now: datetime,
) -> float:
    """Sum the decayed contribution of every intake of one substance."""
    profile = profiles[substance_type]
    relevant = sorted(
        (event for event in events if event.substance_type == substance_type),
        key=lambda event: (event.timestamp, str(event.id)),
    )
    return math.fsum(active_amount(event, profile, now) for event in relevant)


def active_levels(
    events: Iterable[IntakeEvent],
    profiles: Mapping[SubstanceType, SubstanceProfile],
    now: datetime,
) -> dict[SubstanceType, float]:
    """Return the active level of every known substance at ``now``."""
    snapshot = tuple(events)
    return {
        substance_type: active_level(substance_type, snapshot, profiles, now)
        for substance_type in profiles
    }


def project_levels(  # noqa: PLR0913
    substance_type: SubstanceType,
    events: Iterable[IntakeEvent],
    profiles: Mapping[SubstanceType, SubstanceProfile],
    start: datetime,
    hours: float = 8.0,
    interval_minutes: int = 15,
) -> list[LevelPoint]:
    """Sample the active level from ``start`` to ``start + hours`` inclusive."""
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")
    snapshot = tuple(events)
    steps = max(0, int(hours * 60 // interval_minutes))
    points = []
    for step in range(steps + 1):
        time = start + timedelta(minutes=step * interval_minutes)
        points.append(
            LevelPoint(
                time=time,
                level=active_level(substance_type, snapshot, profiles, time),
            )
        )
    return points
