"""Implementation of (Game)Repository using SQLAlchemy"""

from dataclasses import asdict
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel, PlayerModel, TerrainModel
from src.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def list_games(self) -> list[GameModel]:
        query = select(DBGame).order_by(DBGame.created_at)
        return [self._to_model(game_db) for game_db in self.db.scalars(query)]

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game and return the stored data."""
        game_db = DBGame(
            id=UUID(game.id),
            turn=game.turn,
            player1=asdict(game.player1),
            player2=asdict(game.player2),
            terrain=asdict(game.terrain),
            settings=game.settings,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_db.turn = game.turn
        game_db.player1 = asdict(game.player1)
        game_db.player2 = asdict(game.player2)
        game_db.terrain = asdict(game.terrain)
        game_db.settings = game.settings
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            id=str(game_db.id),
            turn=game_db.turn,
            player1=PlayerModel(**game_db.player1),
            player2=PlayerModel(**game_db.player2),
            terrain=TerrainModel(**game_db.terrain),
            settings=dict(game_db.settings or {}),
        )
