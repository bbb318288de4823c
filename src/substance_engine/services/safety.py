"""Tiered caffeine safety classification.

The headline tier is a step function over ``total / daily_limit``. Bands are
half-open ``[previous upper, upper)``, so a total of exactly 0.75x the limit is
already ``CAUTION``. Extra warnings come from independent rules layered on top;
the classifier only owns the headline.
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from substance_engine.domain.intake import IntakeEvent
from substance_engine.domain.safety import SafetyStatus, SafetyTier
from substance_engine.domain.substances import SubstanceType
from substance_engine.services.timing import LATE_DOSE_WARNING

SafetyRule = Callable[[Sequence[IntakeEvent], datetime], list[str]]


@dataclass(frozen=True)
class TierBand:
    """One row of the tier table; ``upper_ratio`` is exclusive."""

    upper_ratio: float
    tier: SafetyTier
    message: str | None


DEFAULT_TIER_BANDS: tuple[TierBand, ...] = (
    TierBand(0.75, SafetyTier.SAFE, None),
    TierBand(
        1.0,
        SafetyTier.CAUTION,
        "Approaching your daily caffeine limit: {total:.0f}/{limit:.0f}mg today.",
    ),
    TierBand(
        1.5,
        SafetyTier.WARNING,
        "⚠️ Daily caffeine limit of {limit:.0f}mg exceeded: {total:.0f}mg today.",
    ),
    TierBand(
        2.5,
        SafetyTier.DANGER,
        "🔴 Very high caffeine intake: {total:.0f}mg today "
        "({ratio:.1f}x your {limit:.0f}mg limit). Stop caffeine for today.",
    ),
    TierBand(
        math.inf,
        SafetyTier.EMERGENCY,
        "🚨 DANGEROUS caffeine intake: {total:.0f}mg today. Seek medical help "
        "urgently if you have chest pain, palpitations, vomiting or confusion.",
    ),
)


def rapid_accumulation_rule(
    window: timedelta = timedelta(minutes=60), threshold_mg: float = 250.0
) -> SafetyRule:
    """Warn when caffeine logged inside the trailing window reaches the threshold."""

    def rule(events: Sequence[IntakeEvent], now: datetime) -> list[str]:
        recent = math.fsum(
            event.amount
            for event in events
            if event.substance_type == SubstanceType.CAFFEINE
            and now - window <= event.timestamp <= now
        )
        if recent < threshold_mg:
            return []
        minutes = int(window.total_seconds() // 60)
        return [
            f"⚠️ Rapid accumulation: {recent:.0f}mg caffeine in the last "
            f"{minutes} minutes. Space out doses to avoid jitters."
        ]

    return rule


def late_intake_rule(
    half_life: timedelta, sleep_cutoff_hour: int = 22
) -> SafetyRule:
    """Warn about caffeine logged too close to bedtime for it to clear.

    The cutoff is ``sleep_cutoff_hour`` minus one half-life, in the timezone of
    ``now``. Only intakes on the same calendar day as ``now`` are considered.
    """
    cutoff_hour = sleep_cutoff_hour - half_life.total_seconds() / 3600

    def rule(events: Sequence[IntakeEvent], now: datetime) -> list[str]:
        for event in events:
            if event.substance_type != SubstanceType.CAFFEINE:
                continue
            local = event.timestamp.astimezone(now.tzinfo)
            if local.date() != now.date() or local > now:
                continue
            if local.hour + local.minute / 60 >= cutoff_hour:
                return [LATE_DOSE_WARNING]
        return []

    return rule


@dataclass
class SafetyClassifier:
    """Picks a headline tier for today's caffeine and collects rule warnings."""

    bands: tuple[TierBand, ...] = DEFAULT_TIER_BANDS
    rules: list[SafetyRule] = field(default_factory=list)

    def classify(self, todays_caffeine: float, daily_limit: float) -> SafetyStatus:
        """Return the headline tier and its message for a cumulative total."""
        total = todays_caffeine
        if not math.isfinite(total) or total < 0:
            total = 0.0
        ratio = _exposure_ratio(total, daily_limit)
        band = self._band_for(ratio)
        warnings: tuple[str, ...] = ()
        if band.message:
            warnings = (
                band.message.format(total=total, limit=daily_limit, ratio=ratio),
            )
        return SafetyStatus(
            tier=band.tier,
            warnings=warnings,
            total_mg=total,
            daily_limit_mg=daily_limit,
            ratio=ratio,
        )

    def assess(
        self,
        todays_caffeine: float,
        daily_limit: float,
        events: Sequence[IntakeEvent],
        now: datetime,
    ) -> SafetyStatus:
        """Classify and append the warnings of every layered rule."""
        status = self.classify(todays_caffeine, daily_limit)
        extra: list[str] = []
        for rule in self.rules:
            extra.extend(rule(events, now))
        if not extra:
            return status
        return SafetyStatus(
            tier=status.tier,
            warnings=status.warnings + tuple(extra),
            total_mg=status.total_mg,
            daily_limit_mg=status.daily_limit_mg,
            ratio=status.ratio,
        )

    def _band_for(self, ratio: float) -> TierBand:
        for band in self.bands:
            if ratio < band.upper_ratio:
                return band
        return self.bands[-1]


def _exposure_ratio(total: float, daily_limit: float) -> float:
    if not math.isfinite(daily_limit) or daily_limit <= 0:
        return math.inf if total > 0 else 0.0
    return total / daily_limit
