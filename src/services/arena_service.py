"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import random
from typing import Optional
from uuid import UUID, uuid4

from src.api.models import (
    CommandRequest,
    CommandResponse,
    CommandsEndRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GameSummary,
    GetGameRequest,
    PlayerView,
    TurnRequest,
)
from src.arena.events import EventRecorder
from src.arena.game import Game
from src.arena.player import Player
from src.core.config import DEFAULT_SETTINGS, GameSettings
from src.core.exceptions import CommandRejectedError, RepositoryError, UnknownPlayerError
from src.core.models import GameModel
from src.db.repository import GameRepository


class ArenaService:
    """Orchestration of layers for the arena game."""

    def __init__(
        self,
        repository: GameRepository,
        settings: GameSettings = DEFAULT_SETTINGS,
        logger: Optional[logging.Logger] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)
        self.rng = rng

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Both players are known up front: the game starts right away."""
        game_id = uuid4()
        new_game = Game.new_game(
            str(game_id),
            request.player1,
            request.player2,
            self.settings,
            log=self.logger,
            rng=self.rng,
        )
        stored_game = self.repo.create_game(new_game.to_model())
        self.logger.info("New game %s: %s vs %s", game_id, request.player1, request.player2)
        return self._create_game_response(stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check whether the turn got resolved.
        """
        return self._create_game_response(self._fetch_game(request.game_id))

    def list_games(self) -> list[GameSummary]:
        """Show all recorded games."""
        return [
            GameSummary(
                game_id=UUID(model.id),
                turn=model.turn,
                players=[model.player1.email, model.player2.email],
            )
            for model in self.repo.list_games()
        ]

    def submit_command(self, request: CommandRequest) -> CommandResponse:
        """Queue one command for the player's next turn."""
        game, recorder = self._restore_game(request.game_id)
        player = self._get_player(game, request.player_id)

        if not game.command(player, request.command):
            raise CommandRejectedError(
                f"Command {request.command!r} refused for player {request.player_id}."
            )

        self.repo.update_game(request.game_id, game.to_model())
        return CommandResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            accepted=True,
            turn_ended=False,
            turn=game.turn,
            notifications=[str(t) for t in recorder.types()],
        )

    def end_commands(self, request: CommandsEndRequest) -> CommandResponse:
        """The player is done for this turn. Resolves the turn if the opponent was already waiting."""
        game, recorder = self._restore_game(request.game_id)
        player = self._get_player(game, request.player_id)

        self._assert_can_commit(game, player)
        turn_ended = game.commands_end(player)

        self.repo.update_game(request.game_id, game.to_model())
        return CommandResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            accepted=True,
            turn_ended=turn_ended,
            turn=game.turn,
            notifications=[str(t) for t in recorder.types()],
        )

    def submit_turn(self, request: TurnRequest) -> CommandResponse:
        """
        Queue every line of the message, then commit.
        ----
        Lines that cannot be read are skipped and reported back. The commit itself must succeed,
        otherwise nothing gets stored.
        """
        game, recorder = self._restore_game(request.game_id)
        player = self._get_player(game, request.player_id)

        rejected = [line for line in request.command_lines() if not game.command(player, line)]
        self._assert_can_commit(game, player)
        turn_ended = game.commands_end(player)

        self.repo.update_game(request.game_id, game.to_model())
        return CommandResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            accepted=True,
            turn_ended=turn_ended,
            turn=game.turn,
            notifications=[str(t) for t in recorder.types()],
            rejected_commands=rejected,
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _restore_game(self, game_id: UUID) -> tuple[Game, EventRecorder]:
        """Rebuild the Game from its snapshot, with a recorder listening to everything it emits."""
        game = Game.from_model(self._fetch_game(game_id), log=self.logger, rng=self.rng)
        recorder = EventRecorder()
        game.subscribe(recorder)
        return game, recorder

    def _assert_can_commit(self, game: Game, player: Player) -> None:
        refusal = game.commit_refusal(player)
        if refusal is not None:
            raise CommandRejectedError(f"Player {player.email} {refusal}")

    def _get_player(self, game: Game, player_id: str) -> Player:
        player = game.get_player_by_id(player_id)
        if player is None:
            raise UnknownPlayerError(f"Player {player_id} is not part of game {game.id}.")
        return player

    def _create_game_response(self, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse."""
        game = Game.from_model(model, log=self.logger)
        return GameResponse(
            game_id=UUID(game.id),
            turn=game.turn,
            player1=self._player_view(game.player1),
            player2=self._player_view(game.player2),
            width=game.terrain.width,
            height=game.terrain.height,
            winner=game.winner,
        )

    def _player_view(self, player: Player) -> PlayerView:
        return PlayerView(
            player_id=player.email,
            position=player.position.to_list(),
            target=player.position.to_target(),
            health=player.health,
            dead=player.dead,
            line=[point.to_list() for point in player.line.path],
            waiting=player.wait,
            queued_actions=[str(kind) for kind in player.wait_actions],
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
