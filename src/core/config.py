"""
Single place for the default game configuration.

A `GameSettings` value is handed to every Game explicitly. Defaults:

| key            | default                                     |
|----------------|---------------------------------------------|
| width          | 13                                          |
| height         | 16                                          |
| player1_start  | (0, 4)                                      |
| player2_start  | (12, 15)                                    |
| damage_range   | (8, 13)  (inclusive)                        |
| max_health     | 100                                         |
| skin_tiles     | see DEFAULT_SKIN_TILES                      |
| sky_height     | 2                                           |
| moon_row       | 1                                           |
"""

import os
from dataclasses import asdict, dataclass, field, fields
from string import ascii_uppercase
from typing import Any, Self

from src.core.exceptions import GameStateError

# Override with an env variable when deploying. Local SQLite file otherwise.
DATABASE_URL = os.environ.get("CURSENDUS_DATABASE_URL", "sqlite:///./cursendus.db")

DEFAULT_SKIN_TILES: dict[str, Any] = {
    "moon": "sky-moon",
    "sky": ["sky-1"],
    "horizon": ["top-1"],
    "ground": ["ground-1"],
}


@dataclass(frozen=True)
class GameSettings:
    width: int = 13
    height: int = 16
    player1_start: tuple[int, int] = (0, 4)
    player2_start: tuple[int, int] = (12, 15)
    damage_range: tuple[int, int] = (8, 13)
    max_health: int = 100
    skin_tiles: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_SKIN_TILES))
    sky_height: int = 2
    moon_row: int = 1

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise GameStateError(
                f"Terrain must be at least 1x1, got {self.width}x{self.height}."
            )
        # attack targets name columns with a single letter
        if self.width > len(ascii_uppercase):
            raise GameStateError(
                f"Terrain can be at most {len(ascii_uppercase)} columns wide, got {self.width}."
            )
        low, high = self.damage_range
        if low < 0 or low > high:
            raise GameStateError(f"Invalid damage range: {self.damage_range}")
        if self.max_health < 1:
            raise GameStateError(f"max_health must be positive, got {self.max_health}")

    def to_dict(self) -> dict[str, Any]:
        """JSON friendly: tuples become lists"""
        data = asdict(self)
        for key in ("player1_start", "player2_start", "damage_range"):
            data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Missing keys fall back to the defaults, unknown keys are refused."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise GameStateError(
                f"Unknown setting(s): {', '.join(sorted(unknown))}. Pick from {', '.join(sorted(known))}"
            )
        values = dict(data)
        for key in ("player1_start", "player2_start", "damage_range"):
            if key in values:
                values[key] = tuple(values[key])
        return cls(**values)


DEFAULT_SETTINGS = GameSettings()
