"""
The Game class is the entrypoint into the domain layer for the service layer.
It collects the commands of both players, and once both players committed, resolves the turn:
movement, trail-tracing and attacks are applied in a fixed order, then the next turn starts.

Operations report refusals with a boolean plus a log line, observers are told about every visible change.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Self

from src.arena import events
from src.arena.actions import AttackAction, MoveAction, TraceAction
from src.arena.command_parser import CommandParser, parse_command
from src.arena.coordinates import Coordinate
from src.arena.events import GameEvent, GameObserver
from src.arena.player import Player
from src.arena.terrain import Terrain
from src.core.config import DEFAULT_SETTINGS, GameSettings
from src.core.exceptions import GameStateError, OutOfBoundsError
from src.core.models import GameModel
from src.core.shared_types import ActionKind, Direction

logger = logging.getLogger(__name__)

# Within a single player's turn: first move OR trace, then attack.
RESOLUTION_ORDER: tuple[ActionKind, ...] = (
    ActionKind.MOVE,
    ActionKind.TRACE,
    ActionKind.ATTACK,
)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    id: str
    turn: int
    player1: Player
    player2: Player
    terrain: Terrain
    settings: GameSettings = DEFAULT_SETTINGS
    logger: logging.Logger = field(default=logger, repr=False)
    parse: CommandParser = field(default=parse_command, repr=False)
    rng: random.Random = field(default_factory=random.Random, repr=False)
    observers: list[GameObserver] = field(default_factory=list, repr=False)

    @classmethod
    def new_game(
        cls,
        game_id: str,
        player1: str,
        player2: str,
        settings: GameSettings = DEFAULT_SETTINGS,
        *,
        log: Optional[logging.Logger] = None,
        parser: CommandParser = parse_command,
        rng: Optional[random.Random] = None,
    ) -> Self:
        """Start a game: both players spawn at their configured cell on a freshly generated terrain."""
        log = log or logger
        rng = rng or random.Random()
        if player1 == player2:
            raise GameStateError(f"A game needs two distinct players, got {player1!r} twice.")

        terrain = Terrain.generate(
            settings.width,
            settings.height,
            settings.skin_tiles,
            settings.sky_height,
            settings.moon_row,
            rng,
        )
        first = Player.spawn(
            player1, Coordinate.from_list(settings.player1_start), settings.max_health, skin=1
        )
        second = Player.spawn(
            player2, Coordinate.from_list(settings.player2_start), settings.max_health, skin=2
        )

        # Add players
        first_added = terrain.occupy(first.email, first.position.x, first.position.y)
        second_added = terrain.occupy(second.email, second.position.x, second.position.y)
        if not first_added or not second_added:
            log.error(
                "Players not added to the map: spawn cells %s and %s on a %sx%s terrain",
                first.position.to_list(),
                second.position.to_list(),
                settings.width,
                settings.height,
            )
            raise GameStateError(
                "Cannot create new game. Both players need a free spawn cell on the terrain."
            )

        return cls(
            id=game_id,
            turn=1,
            player1=first,
            player2=second,
            terrain=terrain,
            settings=settings,
            logger=log,
            parse=parser,
            rng=rng,
        )

    @classmethod
    def from_model(
        cls,
        model: GameModel,
        *,
        log: Optional[logging.Logger] = None,
        parser: CommandParser = parse_command,
        rng: Optional[random.Random] = None,
    ) -> Self:
        """
        Restore a saved game.
        ----
        The terrain snapshot is not trusted for occupancy: every cell held by a player is released again,
        then both players re-occupy the cell recorded as their position.
        """
        # Validation
        if model.turn < 1:
            raise GameStateError(f"Invalid turn number: {model.turn}")
        if model.player1.email == model.player2.email:
            raise GameStateError(
                f"A game needs two distinct players, got {model.player1.email!r} twice."
            )

        settings = GameSettings.from_dict(model.settings) if model.settings else DEFAULT_SETTINGS
        terrain = Terrain.from_model(model.terrain)
        if (terrain.width, terrain.height) != (settings.width, settings.height):
            raise GameStateError(
                f"Terrain snapshot is {terrain.width}x{terrain.height}, settings say {settings.width}x{settings.height}"
            )
        player1 = Player.from_model(model.player1, settings.max_health)
        player2 = Player.from_model(model.player2, settings.max_health)
        for player in (player1, player2):
            if not terrain.is_within_bounds(player.position.x, player.position.y):
                raise GameStateError(
                    f"Player {player.email} stands outside of the terrain at {player.position.to_list()}"
                )

        game = cls(
            id=model.id,
            turn=model.turn,
            player1=player1,
            player2=player2,
            terrain=terrain,
            settings=settings,
            logger=log or logger,
            parse=parser,
            rng=rng or random.Random(),
        )
        game._heal_occupancy()
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            id=self.id,
            turn=self.turn,
            player1=self.player1.to_model(),
            player2=self.player2.to_model(),
            terrain=self.terrain.to_model(),
            settings=self.settings.to_dict(),
        )

    # -- observers --
    def subscribe(self, observer: GameObserver) -> None:
        self.observers.append(observer)

    def unsubscribe(self, observer: GameObserver) -> None:
        if observer in self.observers:
            self.observers.remove(observer)

    # -- players --
    @property
    def players(self) -> tuple[Player, Player]:
        return (self.player1, self.player2)

    @property
    def is_over(self) -> bool:
        return self.player1.dead or self.player2.dead

    @property
    def winner(self) -> Optional[str]:
        """The player still standing once the other one died. Nobody wins if both fell in the same turn."""
        if self.player1.dead and not self.player2.dead:
            return self.player2.email
        if self.player2.dead and not self.player1.dead:
            return self.player1.email
        return None

    def get_player_by_id(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.email == player_id), None)

    def get_other_player(self, player: Player) -> Optional[Player]:
        if player is self.player1:
            return self.player2
        if player is self.player2:
            return self.player1
        return None

    # -- commands --
    def move_player(self, player: Player, direction: Direction | str, silent: bool = False) -> bool:
        """
        Move one cell north/east/south/west.
        Fails without touching anything if the target cell is taken or not on the terrain.
        `silent` suppresses the update event (tracing sends its own).
        """
        try:
            step = Direction(str(direction).upper())
        except ValueError:
            return False

        origin = player.position
        target = origin.step(step)
        try:
            if self.terrain.is_occupied(target.x, target.y):
                return False
        except OutOfBoundsError:
            return False

        self.terrain.release(origin.x, origin.y)
        self.terrain.occupy(player.email, target.x, target.y)
        player.position = target

        if not silent:
            self._emit(events.update())
        return True

    def trace_player(self, player: Player, direction: Direction | str) -> bool:
        """
        Mark the current cell as part of the player's trail, then move.
        Observers get exactly one update, even if the move itself was blocked.
        """
        origin = player.position
        player.line.trace(origin)
        self.terrain.trace(player.email, origin.x, origin.y)

        moved = self.move_player(player, direction, silent=True)
        self._emit(events.update())
        return moved

    def attack_player(self, player: Player, column: str, row: int | str) -> bool:
        """
        Hit the cell at (column letter, 1-based row).
        Only counts if the opponent stands there. Damage is drawn from the configured (inclusive) range.
        """
        target = Coordinate.from_target(column, row)
        if target is None:
            return False
        try:
            occupied = self.terrain.is_occupied(target.x, target.y)
        except OutOfBoundsError:
            return False

        other = self.get_other_player(player)
        if other is None or not occupied:
            return False
        if self.terrain.occupant(target.x, target.y) != other.email:
            return False

        low, high = self.settings.damage_range
        damage = self.rng.randint(low, high)
        other.take_damage(damage)
        self.logger.info(
            "%s hits %s at %s for %s damage (health left: %s)",
            player.email,
            other.email,
            target.to_target(),
            damage,
            other.health,
        )

        self._emit(events.update())
        return True

    # -- turn state machine --
    def command(self, player: Player, command_text: str) -> bool:
        """Try to save a command in the player's waiting list. Does not commit anything."""
        if not self._is_in_game(player):
            return False
        if self.is_over:
            self.logger.error("Command %r (%s) refused: the game is over", command_text, player.email)
            return False

        action = self.parse(command_text)
        if action is None:
            self.logger.error("The command %r (%s) does not exist", command_text, player.email)
            return False

        player.queue(action)
        self.logger.info("Command added to the waitlist: %r (%s)", command_text, player.email)
        return True

    def commit_refusal(self, player: Player) -> Optional[str]:
        """Why `player` cannot commit right now, or None if `commands_end` would accept it."""
        if player is not self.player1 and player is not self.player2:
            return "is not part of this game."
        if self.is_over:
            return "cannot commit: the game is over."
        if not player.wait_actions:
            return "has no actions in the waiting list."
        return None

    def commands_end(self, player: Player) -> bool:
        """
        The player is done queueing commands for this turn.
        ----
        Returns True only if this commit completed the turn (the other player was already waiting).
        """
        if not self._is_in_game(player):
            return False
        refusal = self.commit_refusal(player)
        if refusal is not None:
            self.logger.error("Commands end failed: player [%s] %s", player.email, refusal)
            return False

        player.wait = True
        self.logger.info("Commands end: %s", player.email)

        other = self.get_other_player(player)
        turn_end = other is not None and other.wait
        if turn_end:
            self._end_turn()

        self._emit(events.update())
        return turn_end

    # -- PRIVATE HELPERS ---
    def _end_turn(self) -> None:
        """Apply the waiting actions of player 1, then of player 2, and start the next turn."""
        self.logger.info("End of turn %s.", self.turn)

        for player in self.players:
            for kind in RESOLUTION_ORDER:
                action = player.wait_actions.get(kind)
                if action is None:
                    continue
                match action:
                    case MoveAction(direction=direction):
                        done = self.move_player(player, direction)
                    case TraceAction(direction=direction):
                        done = self.trace_player(player, direction)
                    case AttackAction(column=column, row=row):
                        done = self.attack_player(player, column, row)
                if done:
                    self.logger.info("[%s action] %s", kind, player.email)

        for player in self.players:
            player.reset_turn()

        self.turn += 1
        self._emit(events.new_turn(self.turn))

    def _heal_occupancy(self) -> None:
        for player in self.players:
            stale = self.terrain.evict(player.email)
            if stale and stale != [player.position]:
                self.logger.info(
                    "Terrain snapshot out of sync for %s: freed %s",
                    player.email,
                    [cell.to_list() for cell in stale],
                )
            self.terrain.release(player.position.x, player.position.y)

        for player in self.players:
            if not self.terrain.occupy(player.email, player.position.x, player.position.y):
                raise GameStateError(
                    f"Cannot restore game {self.id}: both players stand on {player.position.to_list()}"
                )

    def _is_in_game(self, player: Player) -> bool:
        if player is not self.player1 and player is not self.player2:
            self.logger.error("The player [%s] does not exist", getattr(player, "email", player))
            return False
        return True

    def _emit(self, event: GameEvent) -> None:
        for observer in list(self.observers):
            observer.notify(event)
