"""The Terrain owns the grid: which player occupies which cell, and which cells carry a trail mark."""

import random
from dataclasses import dataclass, field
from typing import Any, Optional, Self

from src.arena.coordinates import Coordinate
from src.core.exceptions import GameStateError, OutOfBoundsError
from src.core.models import TerrainModel


@dataclass
class Cell:
    occupied: Optional[str] = None  # player id
    trace: Optional[str] = None  # player id of the trail owner
    skin: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"occupied": self.occupied, "trace": self.trace, "skin": self.skin}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            occupied=data.get("occupied"),
            trace=data.get("trace"),
            skin=str(data.get("skin") or ""),
        )


@dataclass
class Terrain:
    width: int
    height: int
    map: list[list[Cell]] = field(default_factory=list)  # map[y][x]

    def __post_init__(self):
        if not self.map:
            self.map = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    @classmethod
    def generate(
        cls,
        width: int,
        height: int,
        skin_tiles: dict[str, Any],
        sky_height: int,
        moon_row: int,
        rng: Optional[random.Random] = None,
    ) -> Self:
        """
        Fresh terrain with a skin tile picked for each cell. Purely visual.
        ----
        * rows above `sky_height`: sky (the moon sits in the middle of `moon_row`)
        * row `sky_height`: horizon
        * the rest: ground
        """
        rng = rng or random.Random()
        moon_column = width // 2
        terrain = cls(width, height)
        for y, row in enumerate(terrain.map):
            for x, cell in enumerate(row):
                if y < sky_height:
                    if y == moon_row and x == moon_column and skin_tiles.get("moon"):
                        cell.skin = skin_tiles["moon"]
                    else:
                        cell.skin = _pick(skin_tiles.get("sky"), rng)
                elif y == sky_height:
                    cell.skin = _pick(skin_tiles.get("horizon"), rng)
                else:
                    cell.skin = _pick(skin_tiles.get("ground"), rng)
        return terrain

    @classmethod
    def from_model(cls, model: TerrainModel) -> Self:
        if len(model.cells) != model.height or any(
            len(row) != model.width for row in model.cells
        ):
            raise GameStateError(
                f"Terrain snapshot does not match its dimensions {model.width}x{model.height}"
            )
        cells = [[Cell.from_dict(data) for data in row] for row in model.cells]
        return cls(model.width, model.height, cells)

    def to_model(self) -> TerrainModel:
        return TerrainModel(
            width=self.width,
            height=self.height,
            cells=[[cell.to_dict() for cell in row] for row in self.map],
        )

    def is_within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        if not self.is_within_bounds(x, y):
            raise OutOfBoundsError(
                f"({x}, {y}) is outside of the {self.width}x{self.height} terrain."
            )
        return self.map[y][x]

    def is_occupied(self, x: int, y: int) -> bool:
        """Raises OutOfBoundsError for coordinates that are not on the terrain."""
        return self.cell(x, y).occupied is not None

    def occupant(self, x: int, y: int) -> Optional[str]:
        return self.cell(x, y).occupied

    def occupy(self, entity: str, x: int, y: int) -> bool:
        """Claim the cell. False if it is off the terrain or someone already stands there."""
        if not self.is_within_bounds(x, y):
            return False
        cell = self.map[y][x]
        if cell.occupied is not None:
            return False
        cell.occupied = entity
        return True

    def release(self, x: int, y: int) -> None:
        if self.is_within_bounds(x, y):
            self.map[y][x].occupied = None

    def evict(self, entity: str) -> list[Coordinate]:
        """Release every cell held by `entity`. Returns the cells that were freed."""
        freed: list[Coordinate] = []
        for y, row in enumerate(self.map):
            for x, cell in enumerate(row):
                if cell.occupied == entity:
                    cell.occupied = None
                    freed.append(Coordinate(x, y))
        return freed

    def occupied_cells(self) -> dict[str, list[Coordinate]]:
        cells: dict[str, list[Coordinate]] = {}
        for y, row in enumerate(self.map):
            for x, cell in enumerate(row):
                if cell.occupied is not None:
                    cells.setdefault(cell.occupied, []).append(Coordinate(x, y))
        return cells

    def trace(self, entity: str, x: int, y: int) -> None:
        self.cell(x, y).trace = entity


def _pick(tiles: Optional[list[str]], rng: random.Random) -> str:
    if not tiles:
        return ""
    return rng.choice(tiles)
