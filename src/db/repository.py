"""Protocol repositories (can implement later for other storage backends)"""

from typing import Protocol
from uuid import UUID

from src.core.models import SessionModel


class SessionRepository(Protocol):
    """Persistence layer orchestration for game sessions"""

    def get_session(self, session_id: UUID) -> SessionModel | None:
        """Get session by ID, if record exists."""
        ...

    def create_session(self, session: SessionModel) -> tuple[SessionModel, UUID]:
        """Store new session and return the stored data + newly created session ID."""
        ...

    def update_session(
        self, session_id: UUID, session: SessionModel
    ) -> SessionModel | None:
        """Add new info to existing record."""
        ...

    def delete_session(self, session_id: UUID) -> SessionModel | None:
        """Remove a session's record."""
        ...


class PreferenceRepository(Protocol):
    """Key-value store for local player preferences"""

    def get_preference(self, key: str) -> str | None:
        """Stored value, or None if the key was never written."""
        ...

    def set_preference(self, key: str, value: str) -> str:
        """Write (or overwrite) a value and return it."""
        ...
