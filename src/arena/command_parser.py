"""
Turn a raw line of text into an Action.

Recognised grammar (case-insensitive):
* move <N|E|S|W>          (alias: m)
* trace <N|E|S|W>         (alias: t)
* attack <column><row>    (alias: a), e.g. "attack C5" or "attack c 5"
"""

import re
from typing import Callable, Optional

from src.arena.actions import Action, AttackAction, MoveAction, TraceAction
from src.core.shared_types import ActionKind, Direction

CommandParser = Callable[[str], Optional[Action]]

KIND_ALIASES: dict[str, ActionKind] = {
    "move": ActionKind.MOVE,
    "m": ActionKind.MOVE,
    "trace": ActionKind.TRACE,
    "t": ActionKind.TRACE,
    "attack": ActionKind.ATTACK,
    "a": ActionKind.ATTACK,
}

TARGET_PATTERN = re.compile(r"^([a-z])\s*([0-9]+)$", re.IGNORECASE)


def parse_command(text: str) -> Optional[Action]:
    """Returns None whenever the text cannot be read as a command."""
    parts = text.strip().split(maxsplit=1)
    if len(parts) != 2:
        return None

    kind = KIND_ALIASES.get(parts[0].lower())
    if kind is None:
        return None
    argument = parts[1].strip()

    match kind:
        case ActionKind.MOVE:
            direction = _parse_direction(argument)
            return MoveAction(direction) if direction else None
        case ActionKind.TRACE:
            direction = _parse_direction(argument)
            return TraceAction(direction) if direction else None
        case ActionKind.ATTACK:
            return _parse_target(argument)


def _parse_direction(argument: str) -> Optional[Direction]:
    try:
        return Direction(argument.upper())
    except ValueError:
        return None


def _parse_target(argument: str) -> Optional[AttackAction]:
    matched = TARGET_PATTERN.match(argument)
    if not matched:
        return None
    column, row = matched.groups()
    # rows are 1-based
    if int(row) < 1:
        return None
    return AttackAction(column.upper(), int(row))
