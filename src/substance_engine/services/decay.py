"""Three-phase decay model for a single intake.

The curve for one intake at elapsed time ``t`` since logging:

  t < onset            0                    (not yet bioavailable)
  onset <= t < peak    amount * (t - onset) / (peak - onset)
  t >= peak            amount * 2 ** (-(t - peak) / half_life)

Intakes logged after ``now`` contribute nothing, which also absorbs clock skew
between devices. The linear rise is a simplification, not an absorption model.
"""

from datetime import datetime

from substance_engine.domain.intake import IntakeEvent
from substance_engine.domain.substances import SubstanceProfile


def active_amount(
    event: IntakeEvent, profile: SubstanceProfile, now: datetime
) -> float:
    """Return the active amount of one intake at ``now``, within [0, amount]."""
    elapsed = (now - event.timestamp).total_seconds()
    if elapsed < 0:
        return 0.0

    onset = profile.onset.total_seconds()
    peak = profile.peak.total_seconds()
    if elapsed < onset:
        return 0.0

    if elapsed < peak:
        level = event.amount * (elapsed - onset) / (peak - onset)
    else:
        half_lives = (elapsed - peak) / profile.half_life.total_seconds()
        level = event.amount * 0.5**half_lives
    return min(event.amount, max(0.0, level))
