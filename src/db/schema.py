"""Database tables / schema"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBSession(Base):
    __tablename__ = "race_sessions"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    screen: Mapped[str]
    player_name: Mapped[str]
    opponent_type: Mapped[str]
    character_pool: Mapped[list[int]] = mapped_column(JSON)
    draft_picks: Mapped[list[int]] = mapped_column(JSON)
    race_started: Mapped[bool] = mapped_column(default=False)
    racers: Mapped[list[dict]] = mapped_column(JSON)
    current_turn: Mapped[int] = mapped_column(default=0)
    turn_number: Mapped[int] = mapped_column(default=1)
    weather: Mapped[str]
    game_log: Mapped[list[str]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBPreference(Base):
    __tablename__ = "preferences"
    key: Mapped[str] = mapped_column(primary_key=True)
    value: Mapped[str]
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
