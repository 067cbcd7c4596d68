"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator, Optional

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.shared_types import ActionType
from src.db.schema import Base
from src.race.race import ActionParams, Racer

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


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
def session_factory(db_session_repo: Session) -> sessionmaker:
    """Factory for extra sessions on the test database, for code that opens its own (e.g. scheduled jobs)."""
    return TestingSessionLocal


class FirstAvailableOpponent:
    """Deterministic opponent: always takes the first free rider and moves its first rider one space."""

    def choose_character(self, seat: int, available: list[int]) -> Optional[int]:
        return available[0] if available else None

    def choose_action(
        self, team: list[Racer]
    ) -> Optional[tuple[Racer, ActionType, ActionParams]]:
        if not team:
            return None
        racer = team[0]
        return racer, ActionType.MOVE, ActionParams(racer.character.id, spaces=1)


@pytest.fixture
def first_available() -> FirstAvailableOpponent:
    return FirstAvailableOpponent()
