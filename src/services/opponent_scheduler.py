"""
Delayed opponent turns.

The AI "thinks" for a fixed delay before it acts. There is at most one pending turn per session,
and it is dropped when the session is torn down before the delay expires.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

logger = logging.getLogger(__name__)


class OpponentScheduler:
    """Wraps an APScheduler scheduler with one-shot jobs keyed by session id."""

    def __init__(self, scheduler: BaseScheduler) -> None:
        self.scheduler = scheduler

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def schedule(
        self, session_id: UUID, delay: float, callback: Callable[[UUID], None]
    ) -> None:
        """Run callback(session_id) once after `delay` seconds, replacing any pending turn for the session."""
        run_date = datetime.now(timezone.utc) + timedelta(seconds=delay)
        self.cancel(session_id)
        self.scheduler.add_job(
            callback,
            "date",
            run_date=run_date,
            args=[session_id],
            id=str(session_id),
            replace_existing=True,
            misfire_grace_time=None,
        )
        logger.debug("Opponent turn for session %s scheduled in %.1fs", session_id, delay)

    def cancel(self, session_id: UUID) -> bool:
        """Drop the pending turn, if any. Returns whether something was cancelled."""
        try:
            self.scheduler.remove_job(str(session_id))
        except JobLookupError:
            return False
        logger.debug("Pending opponent turn for session %s cancelled", session_id)
        return True

    def is_pending(self, session_id: UUID) -> bool:
        return self.scheduler.get_job(str(session_id)) is not None
