"""Request and response models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from substance_engine.domain.intake import IntakeEvent
from substance_engine.domain.levels import LevelPoint
from substance_engine.domain.safety import SafetyStatus
from substance_engine.domain.substances import MeasurementUnit, SubstanceType
from substance_engine.domain.synergy import SynergyReport
from substance_engine.domain.timing import FlowImpact, TimingRecommendation
from substance_engine.services.tracker import DEFAULT_MAX_LOGGED_AMOUNT


class IntakeRequest(BaseModel):
    """Body for logging an intake; omit ``amount`` to log the reference dose."""

    substance_type: SubstanceType
    amount: float | None = Field(
        default=None, le=DEFAULT_MAX_LOGGED_AMOUNT, allow_inf_nan=False
    )
    source: str | None = Field(default=None, max_length=200)


class IntakeResponse(BaseModel):
    """Logged intake."""

    id: UUID
    substance_type: SubstanceType
    amount: float
    unit: MeasurementUnit
    timestamp: datetime
    source: str | None

    @classmethod
    def from_event(cls, event: IntakeEvent) -> "IntakeResponse":
        return cls(
            id=event.id,
            substance_type=event.substance_type,
            amount=event.amount,
            unit=event.unit,
            timestamp=event.timestamp,
            source=event.source,
        )


class SynergyResponse(BaseModel):
    """Synergy state with its explanation."""

    active: bool
    multiplier: float
    caffeine_mg: float
    l_theanine_mg: float
    ratio_score: float
    flow_bonus: float
    description: str

    @classmethod
    def from_report(cls, report: SynergyReport) -> "SynergyResponse":
        return cls(
            active=report.state.active,
            multiplier=report.state.multiplier,
            caffeine_mg=report.caffeine_mg,
            l_theanine_mg=report.l_theanine_mg,
            ratio_score=report.ratio_score,
            flow_bonus=report.flow_bonus,
            description=report.description,
        )


class SafetyResponse(BaseModel):
    """Caffeine safety tier and warnings."""

    tier: str
    severity: int
    warnings: list[str]
    total_mg: float
    daily_limit_mg: float
    ratio: float | None

    @classmethod
    def from_status(cls, status: SafetyStatus) -> "SafetyResponse":
        # JSON has no infinity; a missing limit is reported as a null ratio.
        ratio = status.ratio if status.ratio != float("inf") else None
        return cls(
            tier=status.tier.label,
            severity=int(status.tier),
            warnings=list(status.warnings),
            total_mg=status.total_mg,
            daily_limit_mg=status.daily_limit_mg,
            ratio=ratio,
        )


class LevelPointResponse(BaseModel):
    """One sample of a level projection."""

    time: datetime
    level: float

    @classmethod
    def from_point(cls, point: LevelPoint) -> "LevelPointResponse":
        return cls(time=point.time, level=point.level)


class TimingResponse(BaseModel):
    """Caffeine timing advice for an upcoming session."""

    optimal_consume_time: datetime
    recommended_dose_mg: float
    current_active_mg: float
    daily_remaining_mg: float
    warning: str | None

    @classmethod
    def from_recommendation(
        cls, recommendation: TimingRecommendation
    ) -> "TimingResponse":
        return cls(
            optimal_consume_time=recommendation.optimal_consume_time,
            recommended_dose_mg=recommendation.recommended_dose_mg,
            current_active_mg=recommendation.current_active_mg,
            daily_remaining_mg=recommendation.daily_remaining_mg,
            warning=recommendation.warning,
        )


class FlowImpactResponse(BaseModel):
    """Flow capacity multiplier with its notes."""

    multiplier: float
    description: str

    @classmethod
    def from_impact(cls, impact: FlowImpact) -> "FlowImpactResponse":
        return cls(multiplier=impact.multiplier, description=impact.description)
