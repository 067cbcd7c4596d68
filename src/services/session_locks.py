"""
Per-session locks.

Route handlers and scheduled opponent turns run on different threads. Each of them loads a session,
changes it and saves it again, so the whole load-modify-save has to happen under the session's lock.
"""

import threading
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID


class SessionLocks:
    """Registry of one lock per session id."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def lock_for(self, session_id: UUID) -> threading.Lock:
        key = str(session_id)
        with self._lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    @contextmanager
    def hold(self, session_id: UUID) -> Iterator[None]:
        with self.lock_for(session_id):
            yield

    def discard(self, session_id: UUID) -> None:
        """Forget the lock of a deleted session."""
        with self._lock:
            self._locks.pop(str(session_id), None)

    def __len__(self) -> int:
        return len(self._locks)
