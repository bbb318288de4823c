"""Domain models for caffeine safety classification."""

from dataclasses import dataclass
from enum import IntEnum


class SafetyTier(IntEnum):
    """Ordered severity of cumulative same-day exposure."""

    SAFE = 0
    CAUTION = 1
    WARNING = 2
    DANGER = 3
    EMERGENCY = 4

    @property
    def label(self) -> str:
        """Lowercase name used in API payloads."""
        return self.name.lower()


@dataclass(frozen=True)
class SafetyStatus:
    """Headline tier plus every warning that applies."""

    tier: SafetyTier
    warnings: tuple[str, ...]
    total_mg: float
    daily_limit_mg: float
    ratio: float
