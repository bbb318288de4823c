"""Substance types and their pharmacokinetic profiles."""

from dataclasses import dataclass, replace
from datetime import timedelta
from enum import StrEnum


class SubstanceType(StrEnum):
    """Substances the tracker can log."""

    CAFFEINE = "caffeine"
    L_THEANINE = "l-theanine"
    WATER = "water"


class MeasurementUnit(StrEnum):
    """Units an intake amount is declared in."""

    MG = "mg"
    ML = "ml"


class ProfileConfigurationError(ValueError):
    """Raised when a substance profile violates its timing invariants."""


@dataclass(frozen=True)
class SubstanceProfile:
    """Static pharmacokinetic constants for one substance type."""

    display_name: str
    onset: timedelta
    peak: timedelta
    half_life: timedelta
    reference_dose: float
    unit: MeasurementUnit

    def with_half_life(self, half_life: timedelta) -> "SubstanceProfile":
        """Return a copy with a personalized half-life."""
        return replace(self, half_life=half_life)


# Caffeine: Tmax 45 min (White et al. 2016), t1/2 5 h (IOM consensus, 3-7 h).
# L-theanine: Tmax 50 min, t1/2 60 min (van der Pijl 2010, Scheid et al. 2012).
# Water: simplified daily-intake model, not the 9-14 day biological half-life.
SUBSTANCE_PROFILES: dict[SubstanceType, SubstanceProfile] = {
    SubstanceType.CAFFEINE: SubstanceProfile(
        display_name="Caffeine",
        onset=timedelta(minutes=12.5),
        peak=timedelta(minutes=45),
        half_life=timedelta(hours=5),
        reference_dose=95.0,
        unit=MeasurementUnit.MG,
    ),
    SubstanceType.L_THEANINE: SubstanceProfile(
        display_name="L-Theanine",
        onset=timedelta(minutes=15),
        peak=timedelta(minutes=50),
        half_life=timedelta(minutes=60),
        reference_dose=200.0,
        unit=MeasurementUnit.MG,
    ),
    SubstanceType.WATER: SubstanceProfile(
        display_name="Water",
        onset=timedelta(0),
        peak=timedelta(minutes=20),
        half_life=timedelta(hours=1),
        reference_dose=250.0,
        unit=MeasurementUnit.ML,
    ),
}


def validate_profiles(profiles: dict[SubstanceType, SubstanceProfile]) -> None:
    """Check every profile's timing invariants, raising on the first violation."""
    for substance_type in SubstanceType:
        if substance_type not in profiles:
            raise ProfileConfigurationError(f"Missing profile for {substance_type}")
    for substance_type, profile in profiles.items():
        if profile.onset < timedelta(0):
            raise ProfileConfigurationError(
                f"{substance_type}: onset must not be negative"
            )
        if profile.peak <= profile.onset:
            raise ProfileConfigurationError(
                f"{substance_type}: peak must come after onset"
            )
        if profile.half_life <= timedelta(0):
            raise ProfileConfigurationError(
                f"{substance_type}: half-life must be positive"
            )
        if profile.reference_dose <= 0:
            raise ProfileConfigurationError(
                f"{substance_type}: reference dose must be positive"
            )
