"""Process-local intake repository."""

from dataclasses import dataclass, field
from uuid import UUID

from substance_engine.domain.intake import IntakeEvent
from substance_engine.services.tracker import IntakeRepository


@dataclass
class InMemoryIntakeRepository(IntakeRepository):
    """Keeps intakes in memory, in insertion order."""

    events: dict[UUID, IntakeEvent] = field(default_factory=dict)

    def list_events(self) -> list[IntakeEvent]:
        return list(self.events.values())

    def save_event(self, event: IntakeEvent) -> None:
        self.events[event.id] = event

    def delete_event(self, event_id: UUID) -> None:
        self.events.pop(event_id, None)
