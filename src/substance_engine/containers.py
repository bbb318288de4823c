"""Dependency container wiring for the application."""

from dataclasses import dataclass
from datetime import timedelta

from substance_engine.adapters.memory_intake_repository import (
    InMemoryIntakeRepository,
)
from substance_engine.config import Settings, resolve_profiles
from substance_engine.domain.substances import SubstanceType
from substance_engine.services.safety import (
    SafetyClassifier,
    late_intake_rule,
    rapid_accumulation_rule,
)
from substance_engine.services.synergy import SynergyEvaluator, SynergyPolicy
from substance_engine.services.tracker import (
    Clock,
    IntakeRepository,
    SubstanceTracker,
    utc_now,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    repository: IntakeRepository
    tracker: SubstanceTracker


def build_container(
    settings: Settings | None = None,
    repository: IntakeRepository | None = None,
    clock: Clock = utc_now,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_repository = repository or InMemoryIntakeRepository()
    profiles = resolve_profiles(resolved_settings)
    synergy_evaluator = SynergyEvaluator(
        SynergyPolicy(
            min_caffeine=resolved_settings.synergy_min_caffeine_mg,
            min_l_theanine=resolved_settings.synergy_min_l_theanine_mg,
            multiplier=resolved_settings.synergy_multiplier,
        )
    )
    safety_classifier = SafetyClassifier(
        rules=[
            rapid_accumulation_rule(
                window=timedelta(
                    minutes=resolved_settings.rapid_intake_window_minutes
                ),
                threshold_mg=resolved_settings.rapid_intake_threshold_mg,
            ),
            late_intake_rule(
                half_life=profiles[SubstanceType.CAFFEINE].half_life,
                sleep_cutoff_hour=resolved_settings.sleep_cutoff_hour,
            ),
        ]
    )
    tracker = SubstanceTracker(
        repository=resolved_repository,
        profiles=profiles,
        daily_limit_mg=resolved_settings.daily_caffeine_limit_mg,
        synergy_evaluator=synergy_evaluator,
        safety_classifier=safety_classifier,
        timezone_name=resolved_settings.timezone,
        clock=clock,
        min_logged_amount=resolved_settings.min_logged_amount,
        retention_days=resolved_settings.retention_days,
        max_logged_amount=resolved_settings.max_logged_amount,
        sleep_cutoff_hour=resolved_settings.sleep_cutoff_hour,
    )
    return AppContainer(
        settings=resolved_settings,
        repository=resolved_repository,
        tracker=tracker,
    )
