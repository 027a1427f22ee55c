"""
The actions a player can queue for the next turn.

Closed set of variants: MoveAction | TraceAction | AttackAction. Consumers `match` on the type.
"""

from dataclasses import dataclass
from typing import Any

from src.core.exceptions import GameStateError
from src.core.shared_types import ActionKind, Direction


@dataclass(frozen=True)
class MoveAction:
    direction: Direction

    @property
    def kind(self) -> ActionKind:
        return ActionKind.MOVE

    @property
    def value(self) -> str:
        return self.direction.value


@dataclass(frozen=True)
class TraceAction:
    direction: Direction

    @property
    def kind(self) -> ActionKind:
        return ActionKind.TRACE

    @property
    def value(self) -> str:
        return self.direction.value


@dataclass(frozen=True)
class AttackAction:
    column: str
    row: int

    @property
    def kind(self) -> ActionKind:
        return ActionKind.ATTACK

    @property
    def value(self) -> list[Any]:
        return [self.column, self.row]


Action = MoveAction | TraceAction | AttackAction


def action_from_value(kind: str, value: Any) -> Action:
    """Rebuild an action from the (kind, value) pair stored in a snapshot."""
    try:
        action_kind = ActionKind(kind)
    except ValueError:
        raise GameStateError(
            f"Unknown action kind {kind!r}. Pick one from {', '.join(ActionKind)}"
        )

    try:
        match action_kind:
            case ActionKind.MOVE:
                return MoveAction(Direction(str(value).upper()))
            case ActionKind.TRACE:
                return TraceAction(Direction(str(value).upper()))
            case ActionKind.ATTACK:
                column, row = value
                return AttackAction(str(column).upper(), int(row))
    except (TypeError, ValueError):
        raise GameStateError(f"Invalid value {value!r} for a {kind} action.")
