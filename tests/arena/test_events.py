"""Unit tests for /src/arena/events.py"""

from src.arena import events
from src.arena.events import EventRecorder, GameEvent
from src.core.shared_types import EventType


def test_factories() -> None:
    assert events.update() == GameEvent(EventType.UPDATE, {})
    assert events.new_turn(7) == GameEvent(EventType.NEW_TURN, {"turn": 7})


def test_dict_roundtrip() -> None:
    event = events.new_turn(3)
    assert event.to_dict() == {"type": "new turn", "payload": {"turn": 3}}
    assert GameEvent.from_dict(event.to_dict()) == event


def test_recorder_keeps_order() -> None:
    recorder = EventRecorder()
    recorder.notify(events.update())
    recorder.notify(events.new_turn(2))
    assert recorder.types() == [EventType.UPDATE, EventType.NEW_TURN]

    recorder.clear()
    assert recorder.events == []
