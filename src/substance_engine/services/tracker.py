"""Substance tracker orchestrating the event log and derived state.

The tracker is the only stateful component. It owns the intake log and
composes the decay, aggregation, synergy and safety services on every query.
Nothing derived is cached: each query reads the clock once (unless ``now`` is
passed in) and recomputes from the current snapshot of the log.
"""

import logging
import math
import threading
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from substance_engine.domain.intake import IntakeEvent
from substance_engine.domain.levels import LevelPoint
from substance_engine.domain.safety import SafetyStatus
from substance_engine.domain.substances import (
    SubstanceProfile,
    SubstanceType,
    validate_profiles,
)
from substance_engine.domain.synergy import SynergyReport, SynergyState
from substance_engine.domain.timing import FlowImpact, TimingRecommendation
from substance_engine.services.levels import (
    active_level,
    active_levels,
    project_levels,
)
from substance_engine.services.safety import SafetyClassifier
from substance_engine.services.synergy import SynergyEvaluator
from substance_engine.services.timing import assess_flow_impact, recommend_timing

_logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IntakeListener = Callable[[str, IntakeEvent], None]

DEFAULT_MIN_LOGGED_AMOUNT = 0.001
DEFAULT_MAX_LOGGED_AMOUNT = 10_000.0
DEFAULT_RETENTION_DAYS = 7


class IntakeRepository(Protocol):
    """Persistence interface for the intake log."""

    def list_events(self) -> list[IntakeEvent]:
        """Return stored intakes in insertion order."""

    def save_event(self, event: IntakeEvent) -> None:
        """Persist a new intake."""

    def delete_event(self, event_id: UUID) -> None:
        """Remove a stored intake."""


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(tz=UTC)


class SubstanceTracker:
    """Owns the intake log and answers queries about derived state."""

    def __init__(  # noqa: PLR0913
        self,
        repository: IntakeRepository,
        profiles: Mapping[SubstanceType, SubstanceProfile],
        daily_limit_mg: float,
        synergy_evaluator: SynergyEvaluator | None = None,
        safety_classifier: SafetyClassifier | None = None,
        timezone_name: str = "UTC",
        clock: Clock = utc_now,
        min_logged_amount: float = DEFAULT_MIN_LOGGED_AMOUNT,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        max_logged_amount: float = DEFAULT_MAX_LOGGED_AMOUNT,
        sleep_cutoff_hour: int = 22,
    ) -> None:
        validate_profiles(dict(profiles))
        self.repository = repository
        self.profiles = dict(profiles)
        self.daily_limit_mg = daily_limit_mg
        self.synergy_evaluator = synergy_evaluator or SynergyEvaluator()
        self.safety_classifier = safety_classifier or SafetyClassifier()
        self.timezone = ZoneInfo(timezone_name)
        self.clock = clock
        self.min_logged_amount = min_logged_amount
        self.max_logged_amount = max_logged_amount
        self.sleep_cutoff_hour = sleep_cutoff_hour
        self.retention = timedelta(days=retention_days)
        self._lock = threading.Lock()
        self._events: dict[UUID, IntakeEvent] = {}
        self._snapshot: tuple[IntakeEvent, ...] = ()
        self._listeners: list[IntakeListener] = []
        self._load()

    # Log mutation

    def log(
        self,
        substance_type: SubstanceType,
        amount: float,
        source: str | None = None,
        at: datetime | None = None,
    ) -> IntakeEvent:
        """Append an intake; out-of-range amounts are clamped, never rejected."""
        timestamp = self._aware(at) if at is not None else self._now()
        amount = self._clamp_amount(substance_type, amount)
        event = IntakeEvent(
            id=uuid4(),
            substance_type=substance_type,
            amount=amount,
            unit=self.profiles[substance_type].unit,
            timestamp=timestamp,
            source=source,
        )
        with self._lock:
            self.repository.save_event(event)
            self._events[event.id] = event
            self._snapshot = tuple(self._events.values())
        _logger.info(
            "Logged intake: type=%s amount=%s%s",
            substance_type,
            amount,
            event.unit,
        )
        self._notify("logged", event)
        return event

    def quick_log(
        self,
        substance_type: SubstanceType,
        source: str | None = None,
        at: datetime | None = None,
    ) -> IntakeEvent:
        """Log the reference dose of a substance."""
        dose = self.profiles[substance_type].reference_dose
        return self.log(substance_type, dose, source=source, at=at)

    def remove(self, event_id: UUID) -> bool:
        """Delete an intake from the log; returns False when it is unknown."""
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                return False
            self.repository.delete_event(event_id)
            del self._events[event_id]
            self._snapshot = tuple(self._events.values())
        _logger.info("Removed intake: id=%s", event_id)
        self._notify("removed", event)
        return True

    def set_daily_limit(self, daily_limit_mg: float) -> None:
        """Replace the personalized daily caffeine limit."""
        self.daily_limit_mg = daily_limit_mg

    def subscribe(self, listener: IntakeListener) -> Callable[[], None]:
        """Register a callback run after every log or removal."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # Queries

    def events(self) -> tuple[IntakeEvent, ...]:
        """Return an immutable snapshot of the log in insertion order."""
        return self._snapshot

    def today_events(self, now: datetime | None = None) -> list[IntakeEvent]:
        """Return today's intakes, most recent first."""
        resolved = self._resolve(now)
        return sorted(
            self._today(self._snapshot, resolved),
            key=lambda event: event.timestamp,
            reverse=True,
        )

    def active_level(
        self, substance_type: SubstanceType, now: datetime | None = None
    ) -> float:
        """Return the current decayed level of one substance."""
        return active_level(
            substance_type, self._snapshot, self.profiles, self._resolve(now)
        )

    def active_levels(self, now: datetime | None = None) -> dict[SubstanceType, float]:
        """Return the current decayed level of every substance."""
        return active_levels(self._snapshot, self.profiles, self._resolve(now))

    def synergy(self, now: datetime | None = None) -> SynergyState:
        """Return the caffeine and L-theanine synergy state."""
        levels = self.active_levels(self._resolve(now))
        return self.synergy_evaluator.evaluate(
            levels[SubstanceType.CAFFEINE], levels[SubstanceType.L_THEANINE]
        )

    def synergy_report(self, now: datetime | None = None) -> SynergyReport:
        """Return the synergy state with levels, ratio score and description."""
        levels = self.active_levels(self._resolve(now))
        return self.synergy_evaluator.report(
            levels[SubstanceType.CAFFEINE], levels[SubstanceType.L_THEANINE]
        )

    def safety_status(
        self, now: datetime | None = None, daily_limit: float | None = None
    ) -> SafetyStatus:
        """Classify today's cumulative caffeine against the daily limit."""
        resolved = self._resolve(now)
        snapshot = self._snapshot
        total = self._todays_total(snapshot, SubstanceType.CAFFEINE, resolved)
        limit = self.daily_limit_mg if daily_limit is None else daily_limit
        return self.safety_classifier.assess(
            total, limit, snapshot, resolved.astimezone(self.timezone)
        )

    def todays_total(
        self, substance_type: SubstanceType, now: datetime | None = None
    ) -> float:
        """Return the raw, pre-decay amount logged today for one substance."""
        return self._todays_total(self._snapshot, substance_type, self._resolve(now))

    def project_levels(
        self,
        substance_type: SubstanceType,
        now: datetime | None = None,
        hours: float = 8.0,
        interval_minutes: int = 15,
    ) -> list[LevelPoint]:
        """Sample future levels of one substance for charting."""
        return project_levels(
            substance_type,
            self._snapshot,
            self.profiles,
            self._resolve(now),
            hours=hours,
            interval_minutes=interval_minutes,
        )

    def estimate_clearance(
        self,
        substance_type: SubstanceType = SubstanceType.CAFFEINE,
        target: float = 20.0,
        now: datetime | None = None,
    ) -> datetime:
        """Estimate when the current level decays to ``target``.

        Uses pure exponential decay from the current level, so intakes still
        rising towards their peak make the estimate optimistic.
        """
        resolved = self._resolve(now)
        current = self.active_level(substance_type, resolved)
        if current <= target or target <= 0:
            return resolved
        half_life = self.profiles[substance_type].half_life
        return resolved + half_life * math.log2(current / target)

    def recommend_timing(
        self, session_start: datetime, now: datetime | None = None
    ) -> TimingRecommendation:
        """Recommend caffeine timing and dose for a session starting later."""
        resolved = self._resolve(now)
        caffeine = self.profiles[SubstanceType.CAFFEINE]
        return recommend_timing(
            session_start=self._aware(session_start).astimezone(self.timezone),
            current_level=self.active_level(SubstanceType.CAFFEINE, resolved),
            consumed_today=self._todays_total(
                self._snapshot, SubstanceType.CAFFEINE, resolved
            ),
            daily_limit=self.daily_limit_mg,
            peak=caffeine.peak,
            half_life=caffeine.half_life,
            sleep_cutoff_hour=self.sleep_cutoff_hour,
        )

    def assess_flow_impact(self, now: datetime | None = None) -> FlowImpact:
        """Return the flow capacity multiplier for the current levels."""
        levels = self.active_levels(self._resolve(now))
        caffeine = levels[SubstanceType.CAFFEINE]
        report = self.synergy_evaluator.report(
            caffeine, levels[SubstanceType.L_THEANINE]
        )
        return assess_flow_impact(caffeine, report)

    def current_time(self) -> datetime:
        """Read the clock once, as an aware datetime."""
        return self._now()

    # Internals

    def _load(self) -> None:
        now = self._now()
        cutoff = now - self.retention
        loaded = 0
        for stored in self.repository.list_events():
            event = replace(stored, timestamp=self._aware(stored.timestamp))
            if event.timestamp < cutoff:
                continue
            if event.amount > self.max_logged_amount:
                event = replace(
                    event, amount=self._clamp_amount(event.substance_type, event.amount)
                )
            self._events[event.id] = event
            loaded += 1
        self._snapshot = tuple(self._events.values())
        _logger.info("Loaded intake log: events=%s", loaded)

    def _clamp_amount(self, substance_type: SubstanceType, amount: float) -> float:
        if not math.isfinite(amount) or amount <= 0:
            clamped = self.min_logged_amount
        elif amount > self.max_logged_amount:
            clamped = self.max_logged_amount
        else:
            return amount
        _logger.warning(
            "Clamping out-of-range intake amount: type=%s amount=%s clamped=%s",
            substance_type,
            amount,
            clamped,
        )
        return clamped

    def _notify(self, kind: str, event: IntakeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(kind, event)
            except Exception:
                _logger.exception("Intake listener failed", extra={"kind": kind})

    def _todays_total(
        self,
        events: tuple[IntakeEvent, ...],
        substance_type: SubstanceType,
        now: datetime,
    ) -> float:
        return math.fsum(
            event.amount
            for event in self._today(events, now)
            if event.substance_type == substance_type
        )

    def _today(
        self, events: tuple[IntakeEvent, ...], now: datetime
    ) -> list[IntakeEvent]:
        day = now.astimezone(self.timezone).date()
        return [
            event
            for event in events
            if event.timestamp <= now
            and event.timestamp.astimezone(self.timezone).date() == day
        ]

    def _resolve(self, now: datetime | None) -> datetime:
        return self._now() if now is None else self._aware(now)

    def _now(self) -> datetime:
        return self._aware(self.clock())

    @staticmethod
    def _aware(value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
