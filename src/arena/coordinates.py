"""
A cell coordinate on the terrain

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_uppercase

from src.core.shared_types import Direction

# Unit steps. y grows downwards (row 0 is the top of the terrain), so north is -1.
DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}

COLUMN_LETTERS = ascii_uppercase


@dataclass(frozen=True)
class Coordinate:
    x: int
    y: int

    @classmethod
    def from_target(cls, column: str, row: int | str) -> Coordinate | None:
        """Target notation: column letter (case-insensitive, 'A' = 0) and 1-based row.

        Returns None if the column letter cannot be read. Bounds are not checked here, that is the terrain's job.
        """
        if len(column) != 1 or column.upper() not in COLUMN_LETTERS:
            return None
        try:
            y = int(row) - 1
        except (TypeError, ValueError):
            return None
        return cls(COLUMN_LETTERS.index(column.upper()), y)

    @classmethod
    def from_list(cls, point: list[int] | tuple[int, int]) -> Coordinate:
        return cls(int(point[0]), int(point[1]))

    def to_list(self) -> list[int]:
        return [self.x, self.y]

    def to_target(self) -> str:
        return f"{COLUMN_LETTERS[self.x]}{self.y + 1}"

    def step(self, direction: Direction) -> Coordinate:
        dx, dy = DIRECTION_OFFSETS[direction]
        return Coordinate(self.x + dx, self.y + dy)
