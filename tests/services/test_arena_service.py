"""Unit tests for src/services/arena_service.py"""

import random
from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.core.config import GameSettings
from src.core.exceptions import (
    CommandRejectedError,
    GameError,
    RepositoryError,
    UnknownPlayerError,
)
from src.core.models import GameModel
from src.services.arena_service import (
    ArenaService,
    CommandRequest,
    CommandResponse,
    CommandsEndRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    TurnRequest,
)

PLAYER_1 = "alice@example.com"
PLAYER_2 = "bob@example.com"


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> GameModel:
        self._games[UUID(game.id)] = game
        return game

    def get_game(self, game_id: UUID) -> GameModel | None:
        return self._games.get(game_id)

    def list_games(self) -> list[GameModel]:
        return list(self._games.values())

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ArenaService:
    return ArenaService(mock_repository, rng=random.Random(3))


@pytest.fixture
def game_id(service: ArenaService) -> UUID:
    response = service.create_new_game(CreateGameRequest(player1=PLAYER_1, player2=PLAYER_2))
    return response.game_id


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: ArenaService, mock_repository: MockRepository) -> None:
    response = service.create_new_game(CreateGameRequest(player1=PLAYER_1, player2=PLAYER_2))

    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)
    assert response.turn == 1
    assert response.player1.player_id == PLAYER_1
    assert response.player1.position == [0, 4]
    assert response.player1.target == "A5"
    assert response.player2.position == [12, 15]
    assert (response.width, response.height) == (13, 16)
    assert response.winner is None

    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.turn == 1
    assert stored_game.terrain.cells[4][0]["occupied"] == PLAYER_1


def test_create_with_conflicting_settings(mock_repository: MockRepository) -> None:
    """Make sure service propagates the exceptions."""
    settings = GameSettings(player1_start=(3, 3), player2_start=(3, 3))
    service = ArenaService(mock_repository, settings)
    with pytest.raises(GameError):
        _ = service.create_new_game(CreateGameRequest(player1=PLAYER_1, player2=PLAYER_2))
    assert mock_repository.list_games() == []


# --- SERVICE - GET / LIST / DELETE ----
def test_get_game_state(service: ArenaService, game_id: UUID) -> None:
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.game_id == game_id
    assert response.player2.health == 100


def test_get_unknown_game(service: ArenaService) -> None:
    with pytest.raises(RepositoryError):
        _ = service.get_game_state(GetGameRequest(game_id=uuid4()))


def test_list_games(service: ArenaService, game_id: UUID) -> None:
    other = service.create_new_game(CreateGameRequest(player1="carol", player2="dave"))
    summaries = {summary.game_id: summary for summary in service.list_games()}
    assert set(summaries) == {game_id, other.game_id}
    assert summaries[other.game_id].players == ["carol", "dave"]


def test_delete_game(service: ArenaService, game_id: UUID) -> None:
    service.delete_game(DeleteGameRequest(game_id=game_id))
    with pytest.raises(RepositoryError):
        _ = service.get_game_state(GetGameRequest(game_id=game_id))


# --- SERVICE - COMMANDS ----
def test_submit_command_is_persisted(service: ArenaService, mock_repository: MockRepository, game_id: UUID) -> None:
    response = service.submit_command(
        CommandRequest(game_id=game_id, player_id=PLAYER_1, command="move E")
    )
    assert isinstance(response, CommandResponse)
    assert response.accepted
    assert not response.turn_ended
    assert response.notifications == []

    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.player1.wait_actions == {"move": "E"}


def test_submit_unparsable_command(service: ArenaService, mock_repository: MockRepository, game_id: UUID) -> None:
    with pytest.raises(CommandRejectedError):
        _ = service.submit_command(
            CommandRequest(game_id=game_id, player_id=PLAYER_1, command="fly away")
        )
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.player1.wait_actions == {}


def test_unknown_player(service: ArenaService, game_id: UUID) -> None:
    with pytest.raises(UnknownPlayerError):
        _ = service.submit_command(
            CommandRequest(game_id=game_id, player_id="mallory", command="move E")
        )
    with pytest.raises(UnknownPlayerError):
        _ = service.end_commands(CommandsEndRequest(game_id=game_id, player_id="mallory"))


def test_end_commands_with_empty_queue(service: ArenaService, game_id: UUID) -> None:
    with pytest.raises(CommandRejectedError):
        _ = service.end_commands(CommandsEndRequest(game_id=game_id, player_id=PLAYER_1))


def test_full_turn(service: ArenaService, game_id: UUID) -> None:
    """Both players queue and commit through separate calls. The snapshot carries the state in between."""
    service.submit_command(CommandRequest(game_id=game_id, player_id=PLAYER_1, command="move E"))
    first = service.end_commands(CommandsEndRequest(game_id=game_id, player_id=PLAYER_1))
    assert not first.turn_ended
    assert first.notifications == ["update"]

    service.submit_command(CommandRequest(game_id=game_id, player_id=PLAYER_2, command="move W"))
    second = service.end_commands(CommandsEndRequest(game_id=game_id, player_id=PLAYER_2))
    assert second.turn_ended
    assert second.turn == 2
    assert second.notifications == ["update", "update", "new turn", "update"]

    state = service.get_game_state(GetGameRequest(game_id=game_id))
    assert state.turn == 2
    assert state.player1.position == [1, 4]
    assert state.player2.position == [11, 15]
    assert not state.player1.waiting
    assert state.player1.queued_actions == []


def test_end_commands_after_game_over(service: ArenaService, mock_repository: MockRepository, game_id: UUID) -> None:
    """Refused commits are not stored"""
    service.submit_command(CommandRequest(game_id=game_id, player_id=PLAYER_1, command="move E"))
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    stored.player2.health = 0
    stored.player2.dead = True

    with pytest.raises(CommandRejectedError, match="game is over"):
        _ = service.end_commands(CommandsEndRequest(game_id=game_id, player_id=PLAYER_1))
    after = mock_repository.get_game(game_id)
    assert after is not None
    assert not after.player1.wait


# --- SERVICE - WHOLE TURN IN ONE MESSAGE ----
def test_submit_turn(service: ArenaService, game_id: UUID) -> None:
    """Each line is a command, unreadable lines are skipped, then the player commits"""
    first = service.submit_turn(
        TurnRequest(game_id=game_id, player_id=PLAYER_1, commands="move E\r\nsing loudly\n\nattack M16")
    )
    assert first.rejected_commands == ["sing loudly"]
    assert not first.turn_ended

    state = service.get_game_state(GetGameRequest(game_id=game_id))
    assert state.player1.waiting
    assert sorted(state.player1.queued_actions) == ["attack", "move"]

    second = service.submit_turn(TurnRequest(game_id=game_id, player_id=PLAYER_2, commands="trace N"))
    assert second.turn_ended
    assert second.turn == 2
    assert second.rejected_commands == []

    state = service.get_game_state(GetGameRequest(game_id=game_id))
    assert state.player1.position == [1, 4]
    assert state.player2.position == [12, 14]
    assert state.player2.health < 100


def test_submit_turn_nothing_readable(service: ArenaService, mock_repository: MockRepository, game_id: UUID) -> None:
    with pytest.raises(CommandRejectedError):
        _ = service.submit_turn(TurnRequest(game_id=game_id, player_id=PLAYER_1, commands="hello\nworld"))
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.player1.wait_actions == {}
