"""Protocol repository (implemented with SQL Alchemy, could be anything else that stores a GameModel)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def list_games(self) -> list[GameModel]:
        """All stored games."""
        ...

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game (keyed by its id) and return the stored data."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...
