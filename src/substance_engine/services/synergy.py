"""Caffeine and L-theanine synergy evaluation.

Thresholds follow Owen et al. 2008: at least 50 mg caffeine together with at
least 100 mg L-theanine. State is recomputed from the current levels on every
call with no hysteresis.
"""

from dataclasses import dataclass, field

from substance_engine.domain.synergy import SynergyReport, SynergyState

MIN_CAFFEINE_SYNERGY = 50.0
MIN_LTHEANINE_SYNERGY = 100.0
SYNERGY_MULTIPLIER = 1.15
# Caffeine to L-theanine, 1:2.
OPTIMAL_RATIO = 0.5


@dataclass(frozen=True)
class SynergyPolicy:
    """Thresholds and bonus for the synergy rule."""

    min_caffeine: float = MIN_CAFFEINE_SYNERGY
    min_l_theanine: float = MIN_LTHEANINE_SYNERGY
    multiplier: float = SYNERGY_MULTIPLIER


@dataclass
class SynergyEvaluator:
    """Turns aggregated levels into a synergy state."""

    policy: SynergyPolicy = field(default_factory=SynergyPolicy)

    def evaluate(self, caffeine_level: float, l_theanine_level: float) -> SynergyState:
        """Return the synergy state; both thresholds are inclusive."""
        active = (
            caffeine_level >= self.policy.min_caffeine
            and l_theanine_level >= self.policy.min_l_theanine
        )
        if active:
            multiplier = max(1.0, self.policy.multiplier)
            return SynergyState(multiplier=multiplier, active=True)
        return SynergyState(multiplier=1.0, active=False)

    def report(self, caffeine_level: float, l_theanine_level: float) -> SynergyReport:
        """Return the synergy state with ratio score and a description."""
        state = self.evaluate(caffeine_level, l_theanine_level)
        ratio_score = 0.0
        if state.active and l_theanine_level > 0:
            deviation = abs(caffeine_level / l_theanine_level - OPTIMAL_RATIO)
            ratio_score = max(0.0, 1.0 - deviation)
        return SynergyReport(
            state=state,
            caffeine_mg=caffeine_level,
            l_theanine_mg=l_theanine_level,
            ratio_score=ratio_score,
            description=self._describe(state, caffeine_level, l_theanine_level),
        )

    def _describe(
        self, state: SynergyState, caffeine_level: float, l_theanine_level: float
    ) -> str:
        min_caffeine = self.policy.min_caffeine
        min_l_theanine = self.policy.min_l_theanine
        if state.active:
            return "Synergy active: enhanced focus with reduced jitters"
        if caffeine_level < min_caffeine and l_theanine_level < min_l_theanine:
            return (
                f"No synergy: need >={min_caffeine:.0f}mg caffeine "
                f"+ >={min_l_theanine:.0f}mg L-theanine"
            )
        if caffeine_level < min_caffeine:
            return f"Need >={min_caffeine:.0f}mg caffeine for synergy"
        return f"Need >={min_l_theanine:.0f}mg L-theanine for synergy"
