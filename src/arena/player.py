"""A player: where it stands, how healthy it is, the trail it left and what it wants to do next turn."""

from dataclasses import dataclass, field
from typing import Self

from src.arena.actions import Action, action_from_value
from src.arena.coordinates import Coordinate
from src.core.models import PlayerModel
from src.core.shared_types import ActionKind


@dataclass
class Line:
    """The trail of a player. First point is always the spawn position."""

    path: list[Coordinate] = field(default_factory=list)

    def trace(self, coordinate: Coordinate) -> None:
        # Tracing from the same cell twice in a row does not extend the line
        if self.path and self.path[-1] == coordinate:
            return
        self.path.append(coordinate)


@dataclass
class Player:
    email: str
    position: Coordinate
    health: int
    max_health: int
    dead: bool = False
    line: Line = field(default_factory=Line)
    wait_actions: dict[ActionKind, Action] = field(default_factory=dict)
    wait: bool = False
    skin: int = 1

    @classmethod
    def spawn(cls, email: str, position: Coordinate, max_health: int, skin: int) -> Self:
        return cls(
            email=email,
            position=position,
            health=max_health,
            max_health=max_health,
            line=Line([position]),
            skin=skin,
        )

    @classmethod
    def from_model(cls, model: PlayerModel, max_health: int) -> Self:
        position = Coordinate.from_list(model.position)
        health = max(0, min(model.health, max_health))
        player = cls(
            email=model.email,
            position=position,
            health=health,
            max_health=max_health,
            dead=health == 0,
            line=Line([Coordinate.from_list(point) for point in model.line] or [position]),
            wait=model.wait,
            skin=model.skin,
        )
        # move and trace are exclusive, queue() keeps the trace
        for kind, value in model.wait_actions.items():
            player.queue(action_from_value(kind, value))
        return player

    def to_model(self) -> PlayerModel:
        return PlayerModel(
            email=self.email,
            position=self.position.to_list(),
            health=self.health,
            dead=self.dead,
            line=[point.to_list() for point in self.line.path],
            wait_actions={
                str(kind): action.value for kind, action in self.wait_actions.items()
            },
            wait=self.wait,
            skin=self.skin,
        )

    def queue(self, action: Action) -> None:
        """Store the action for next turn. A player either moves or traces, never both: trace wins."""
        self.wait_actions[action.kind] = action
        if ActionKind.MOVE in self.wait_actions and ActionKind.TRACE in self.wait_actions:
            del self.wait_actions[ActionKind.MOVE]

    def take_damage(self, amount: int) -> None:
        self.health = max(0, self.health - amount)
        self.dead = self.health == 0

    def reset_turn(self) -> None:
        self.wait_actions = {}
        self.wait = False
