"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from substance_engine.adapters.memory_intake_repository import (
    InMemoryIntakeRepository,
)
from substance_engine.config import Settings
from substance_engine.containers import AppContainer, build_container
from substance_engine.domain.intake import IntakeEvent
from substance_engine.domain.substances import (
    SUBSTANCE_PROFILES,
    SubstanceType,
)
from substance_engine.services.tracker import SubstanceTracker

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


@dataclass
class FakeClock:
    """Manually advanced clock that counts how often it was read."""

    now: datetime = T0
    reads: int = 0

    def __call__(self) -> datetime:
        self.reads += 1
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@dataclass
class RecordingListener:
    """Intake listener that records every notification."""

    calls: list[tuple[str, IntakeEvent]] = field(default_factory=list)

    def __call__(self, kind: str, event: IntakeEvent) -> None:
        self.calls.append((kind, event))


def make_event(
    substance_type: SubstanceType,
    amount: float,
    timestamp: datetime = T0,
    source: str | None = None,
) -> IntakeEvent:
    return IntakeEvent(
        id=uuid4(),
        substance_type=substance_type,
        amount=amount,
        unit=SUBSTANCE_PROFILES[substance_type].unit,
        timestamp=timestamp,
        source=source,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryIntakeRepository:
    return InMemoryIntakeRepository()


@pytest.fixture
def container(
    settings: Settings, repository: InMemoryIntakeRepository, clock: FakeClock
) -> AppContainer:
    return build_container(settings, repository=repository, clock=clock)


@pytest.fixture
def tracker(container: AppContainer) -> SubstanceTracker:
    return container.tracker
