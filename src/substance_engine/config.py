"""Application configuration."""

import os
from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

from substance_engine.domain.substances import (
    SUBSTANCE_PROFILES,
    SubstanceProfile,
    SubstanceType,
    validate_profiles,
)

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    daily_caffeine_limit_mg: float = 400.0
    synergy_min_caffeine_mg: float = 50.0
    synergy_min_l_theanine_mg: float = 100.0
    synergy_multiplier: float = 1.15
    timezone: str = "UTC"
    min_logged_amount: float = 0.001
    max_logged_amount: float = 10_000.0
    retention_days: int = 7
    rapid_intake_window_minutes: int = 60
    rapid_intake_threshold_mg: float = 250.0
    sleep_cutoff_hour: int = 22
    caffeine_half_life_hours: float | None = None
    l_theanine_half_life_hours: float | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_profiles(settings: Settings) -> dict[SubstanceType, SubstanceProfile]:
    """Apply personalized half-lives to the default profiles and validate them."""
    profiles = dict(SUBSTANCE_PROFILES)
    overrides = {
        SubstanceType.CAFFEINE: settings.caffeine_half_life_hours,
        SubstanceType.L_THEANINE: settings.l_theanine_half_life_hours,
    }
    for substance_type, hours in overrides.items():
        if hours is None:
            continue
        profiles[substance_type] = profiles[substance_type].with_half_life(
            timedelta(hours=hours)
        )
    validate_profiles(profiles)
    return profiles
