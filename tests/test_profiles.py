"""Tests for substance profiles and intake validation."""

from dataclasses import replace
from datetime import timedelta
from uuid import uuid4

import pytest

from substance_engine.adapters.memory_intake_repository import (
    InMemoryIntakeRepository,
)
from substance_engine.config import Settings, resolve_profiles
from substance_engine.domain.intake import IntakeEvent
from substance_engine.domain.substances import (
    SUBSTANCE_PROFILES,
    MeasurementUnit,
    ProfileConfigurationError,
    SubstanceType,
    validate_profiles,
)
from substance_engine.services.tracker import SubstanceTracker
from tests.conftest import T0


def test_default_profiles_are_valid() -> None:
    validate_profiles(SUBSTANCE_PROFILES)

    caffeine = SUBSTANCE_PROFILES[SubstanceType.CAFFEINE]
    assert caffeine.half_life == timedelta(hours=5)
    assert caffeine.reference_dose == 95.0


@pytest.mark.parametrize(
    "changes",
    [
        {"peak": timedelta(minutes=10)},
        {"peak": timedelta(minutes=12.5)},
        {"half_life": timedelta(0)},
        {"onset": timedelta(minutes=-1)},
        {"reference_dose": 0.0},
    ],
)
def test_invalid_profile_rejected(changes: dict[str, object]) -> None:
    profiles = dict(SUBSTANCE_PROFILES)
    profiles[SubstanceType.CAFFEINE] = replace(
        profiles[SubstanceType.CAFFEINE], **changes
    )

    with pytest.raises(ProfileConfigurationError):
        validate_profiles(profiles)


def test_missing_profile_rejected() -> None:
    profiles = dict(SUBSTANCE_PROFILES)
    del profiles[SubstanceType.WATER]

    with pytest.raises(ProfileConfigurationError):
        validate_profiles(profiles)


def test_tracker_refuses_invalid_profiles() -> None:
    profiles = dict(SUBSTANCE_PROFILES)
    profiles[SubstanceType.L_THEANINE] = profiles[
        SubstanceType.L_THEANINE
    ].with_half_life(timedelta(minutes=-5))

    with pytest.raises(ProfileConfigurationError):
        SubstanceTracker(InMemoryIntakeRepository(), profiles, 400)


def test_resolve_profiles_applies_half_life_overrides() -> None:
    settings = Settings(_env_file=None, l_theanine_half_life_hours=1.5)

    profiles = resolve_profiles(settings)

    assert profiles[SubstanceType.L_THEANINE].half_life == timedelta(hours=1.5)
    caffeine = SubstanceType.CAFFEINE
    assert profiles[caffeine] == SUBSTANCE_PROFILES[caffeine]
    assert SUBSTANCE_PROFILES[SubstanceType.L_THEANINE].half_life == timedelta(hours=1)


def test_resolve_profiles_rejects_non_positive_override() -> None:
    settings = Settings(_env_file=None, caffeine_half_life_hours=0)

    with pytest.raises(ProfileConfigurationError):
        resolve_profiles(settings)


@pytest.mark.parametrize("amount", [0.0, -1.0, float("nan"), float("inf")])
def test_intake_event_requires_positive_finite_amount(amount: float) -> None:
    with pytest.raises(ValueError):
        IntakeEvent(
            id=uuid4(),
            substance_type=SubstanceType.CAFFEINE,
            amount=amount,
            unit=MeasurementUnit.MG,
            timestamp=T0,
        )
