"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import logging
import random
from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.arena.events import EventRecorder
from src.arena.game import Game
from src.core.config import GameSettings
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

PLAYER_1 = "alice@example.com"
PLAYER_2 = "bob@example.com"


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def quiet_logger() -> logging.Logger:
    """A logger that goes nowhere (caplog still sees it through propagation)."""
    log = logging.getLogger("tests.arena")
    log.addHandler(logging.NullHandler())
    return log


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def game(quiet_logger: logging.Logger, recorder: EventRecorder) -> Game:
    """Default 13x16 game. Player 1 spawns at (0,4), player 2 at (12,15)."""
    new_game = Game.new_game(
        "game-1", PLAYER_1, PLAYER_2, GameSettings(), log=quiet_logger, rng=random.Random(42)
    )
    new_game.subscribe(recorder)
    return new_game
