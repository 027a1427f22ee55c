"""
Type definitions used across layers
"""

from enum import StrEnum


class Direction(StrEnum):
    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"


class ActionKind(StrEnum):
    MOVE = "move"
    TRACE = "trace"
    ATTACK = "attack"


class EventType(StrEnum):
    UPDATE = "update"
    NEW_TURN = "new turn"
