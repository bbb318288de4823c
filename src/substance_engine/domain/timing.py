"""Domain models for caffeine timing advice and flow impact."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimingRecommendation:
    """When and how much caffeine to take ahead of a focus session."""

    optimal_consume_time: datetime
    recommended_dose_mg: float
    current_active_mg: float
    daily_remaining_mg: float
    warning: str | None = None


@dataclass(frozen=True)
class FlowImpact:
    """Multiplier applied to flow capacity by the current substance levels."""

    multiplier: float
    description: str
