"""Implementation of the repositories using SQLAlchemy"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import SessionModel
from src.db.schema import DBPreference, DBSession


class SQLSessionRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_session(self, session_id: UUID) -> SessionModel | None:
        """Get session by ID, if record exists."""
        session_db = self._fetch_session(session_id)
        if session_db:
            return self._to_model(session_db)
        return None

    def create_session(self, session: SessionModel) -> tuple[SessionModel, UUID]:
        """Store new session and return the stored data + newly created session ID."""

        new_id = uuid4()
        session_db = DBSession(id=new_id)
        self._copy_fields(session, session_db)
        self.db.add(session_db)
        self.db.commit()
        self.db.refresh(session_db)
        return self._to_model(session_db), new_id

    def update_session(
        self, session_id: UUID, session: SessionModel
    ) -> SessionModel | None:
        """Add new info to existing record."""
        session_db = self._fetch_session(session_id)
        if not session_db:
            return None
        self._copy_fields(session, session_db)
        self.db.commit()
        self.db.refresh(session_db)
        return self._to_model(session_db)

    def delete_session(self, session_id: UUID) -> SessionModel | None:
        """Remove a session's record."""
        session_db = self._fetch_session(session_id)
        if not session_db:
            return None
        session_model = self._to_model(session_db)
        self.db.delete(session_db)
        self.db.commit()
        return session_model

    def _fetch_session(self, session_id: UUID) -> DBSession | None:
        query = select(DBSession).where(DBSession.id == session_id)
        return self.db.scalar(query)

    @staticmethod
    def _copy_fields(session: SessionModel, session_db: DBSession) -> None:
        # JSON columns only register a change when a new object is assigned, hence the copies.
        session_db.screen = session.screen
        session_db.player_name = session.player_name
        session_db.opponent_type = session.opponent_type
        session_db.character_pool = list(session.character_pool)
        session_db.draft_picks = list(session.draft_picks)
        session_db.race_started = session.race_started
        session_db.racers = [dict(record) for record in session.racers]
        session_db.current_turn = session.current_turn
        session_db.turn_number = session.turn_number
        session_db.weather = session.weather
        session_db.game_log = list(session.game_log)

    def _to_model(self, session_db: DBSession) -> SessionModel:
        """Convert SQLAlchemy model to data transfer model."""
        return SessionModel(
            screen=session_db.screen,
            player_name=session_db.player_name,
            opponent_type=session_db.opponent_type,
            character_pool=list(session_db.character_pool),
            draft_picks=list(session_db.draft_picks),
            race_started=session_db.race_started,
            racers=[dict(record) for record in session_db.racers],
            current_turn=session_db.current_turn,
            turn_number=session_db.turn_number,
            weather=session_db.weather,
            game_log=list(session_db.game_log),
        )


class SQLPreferenceRepository:
    """Player preferences stored as key-value rows"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_preference(self, key: str) -> str | None:
        preference = self.db.get(DBPreference, key)
        return preference.value if preference else None

    def set_preference(self, key: str, value: str) -> str:
        preference = self.db.get(DBPreference, key)
        if preference is None:
            preference = DBPreference(key=key, value=value)
            self.db.add(preference)
        else:
            preference.value = value
        self.db.commit()
        return value
