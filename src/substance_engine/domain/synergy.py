"""Domain models for caffeine and L-theanine synergy."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SynergyState:
    """Multiplier and flag for the current co-activity of both substances."""

    multiplier: float
    active: bool


@dataclass(frozen=True)
class SynergyReport:
    """Synergy state with the levels and explanation behind it."""

    state: SynergyState
    caffeine_mg: float
    l_theanine_mg: float
    ratio_score: float
    description: str

    @property
    def flow_bonus(self) -> float:
        """Focus bonus between 0.10 and 0.15 while synergy is active."""
        if not self.state.active:
            return 0.0
        return 0.10 + self.ratio_score * 0.05
