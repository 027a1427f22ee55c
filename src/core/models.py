"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any

# Type aliases to make the snapshots easier to read
PlayerId = str
Point = list[int]  # [x, y]
CellData = dict[str, Any]  # {"occupied": PlayerId | None, "trace": PlayerId | None, "skin": str}


@dataclass
class PlayerModel:
    """Snapshot of a single player. `wait_actions` maps action kind -> action value."""

    email: PlayerId
    position: Point
    health: int
    dead: bool
    line: list[Point]
    wait_actions: dict[str, Any] = field(default_factory=dict)
    wait: bool = False
    skin: int = 1


@dataclass
class TerrainModel:
    """Snapshot of the grid. `cells` is indexed as cells[y][x]."""

    width: int
    height: int
    cells: list[list[CellData]]


@dataclass
class GameModel:
    """Transport-safe representation of a game used between API, Service, DB, and Game layers."""

    id: str
    turn: int
    player1: PlayerModel
    player2: PlayerModel
    terrain: TerrainModel
    settings: dict[str, Any] = field(default_factory=dict)
