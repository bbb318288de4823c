"""Tests for container wiring."""

from datetime import timedelta

from substance_engine.config import Settings
from substance_engine.containers import build_container
from substance_engine.domain.substances import SubstanceType


def test_build_container_creates_tracker(settings) -> None:
    container = build_container(settings)

    assert container.tracker is not None
    assert container.tracker.repository is container.repository
    assert container.tracker.daily_limit_mg == 400.0
    assert len(container.tracker.safety_classifier.rules) == 2


def test_build_container_applies_settings(clock) -> None:
    settings = Settings(
        _env_file=None,
        daily_caffeine_limit_mg=300,
        caffeine_half_life_hours=6,
        synergy_multiplier=1.2,
    )

    container = build_container(settings, clock=clock)
    tracker = container.tracker

    assert tracker.daily_limit_mg == 300
    assert tracker.profiles[SubstanceType.CAFFEINE].half_life == timedelta(hours=6)
    assert tracker.synergy_evaluator.policy.multiplier == 1.2
