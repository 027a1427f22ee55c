"""
Game events for observers (transport layer, tests...).
The Game writes events to whoever subscribed; it does not care how (or if) they are delivered.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, Self

from src.core.shared_types import EventType


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""

    type: EventType
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"type": str(self.type), "payload": self.payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(type=EventType(data["type"]), payload=data.get("payload", {}))


class GameObserver(Protocol):
    def notify(self, event: GameEvent) -> None: ...


class EventRecorder:
    """Observer that simply keeps every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[GameEvent] = []

    def notify(self, event: GameEvent) -> None:
        self.events.append(event)

    def types(self) -> list[EventType]:
        return [event.type for event in self.events]

    def clear(self) -> None:
        self.events.clear()


# ===== Event Factory Functions =====


def update() -> GameEvent:
    """Visible game state changed. No payload."""
    return GameEvent(EventType.UPDATE)


def new_turn(turn_number: int) -> GameEvent:
    return GameEvent(EventType.NEW_TURN, {"turn": turn_number})
