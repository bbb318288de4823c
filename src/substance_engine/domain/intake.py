"""Domain model for logged intakes."""

import math
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from substance_engine.domain.substances import MeasurementUnit, SubstanceType


@dataclass(frozen=True)
class IntakeEvent:
    """One logged dose of a substance."""

    id: UUID
    substance_type: SubstanceType
    amount: float
    unit: MeasurementUnit
    timestamp: datetime
    source: str | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.amount) or self.amount <= 0:
            raise ValueError(f"Intake amount must be positive, got {self.amount}")
