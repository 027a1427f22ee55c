"""Requests and Response models"""

from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from src.core.exceptions import InvalidRequestError

PlayerId = str
Point = list[int]


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player1: PlayerId
    player2: PlayerId

    @field_validator("player1", "player2")
    @classmethod
    def validate_player_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("Player id cannot be empty.")
        return value

    @model_validator(mode="after")
    def validate_distinct_players(self) -> "CreateGameRequest":
        if self.player1 == self.player2:
            raise InvalidRequestError(
                f"A game needs two different players, got {self.player1!r} twice."
            )
        return self


class GetGameRequest(BaseModel):
    game_id: UUID


class CommandRequest(BaseModel):
    game_id: UUID
    player_id: PlayerId
    command: str

    @field_validator("command")
    @classmethod
    def validate_command(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Command cannot be empty.")
        return value.strip()


class CommandsEndRequest(BaseModel):
    game_id: UUID
    player_id: PlayerId


class TurnRequest(BaseModel):
    """Several commands at once, one per line, committed right after."""

    game_id: UUID
    player_id: PlayerId
    commands: str

    @field_validator("commands")
    @classmethod
    def validate_commands(cls, value: str) -> str:
        if not any(line.strip() for line in value.splitlines()):
            raise InvalidRequestError("At least one command is needed to play a turn.")
        return value

    def command_lines(self) -> list[str]:
        return [line.strip() for line in self.commands.splitlines() if line.strip()]


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class PlayerView(BaseModel):
    player_id: PlayerId
    position: Point
    target: str  # the position in attack notation, e.g. "A5"
    health: int
    dead: bool
    line: list[Point]
    waiting: bool
    queued_actions: list[str]


class GameResponse(BaseModel):
    game_id: UUID
    turn: int
    player1: PlayerView
    player2: PlayerView
    width: int
    height: int
    winner: PlayerId | None


class GameSummary(BaseModel):
    game_id: UUID
    turn: int
    players: list[PlayerId]


class CommandResponse(BaseModel):
    game_id: UUID
    player_id: PlayerId
    accepted: bool
    turn_ended: bool
    turn: int
    notifications: list[str]
    rejected_commands: list[str] = []
