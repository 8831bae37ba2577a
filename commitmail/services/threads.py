"""Commit → first-notification mapping used to thread replies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from commitmail.models import Thread

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThreadRecord:
    commit_id: str
    subject: str
    message_id: str


class ThreadStore:
    """
    Persist the subject and message id of the first mail about each commit.

    Pushes go through ``create_thread_if_absent`` so an existing record is
    kept. ``create_thread`` itself is a plain upsert: two pushes of the same
    new commit racing each other can both pass the absence check, and the last
    write wins.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def create_thread(self, commit_id: str, subject: str, message_id: str) -> None:
        with self._session_factory() as db:
            db.merge(Thread(commit_id=commit_id, subject=subject, message_id=message_id))
            db.commit()

    def create_thread_if_absent(self, commit_id: str, subject: str, message_id: str) -> bool:
        """
        Record a thread unless one already exists for ``commit_id``.

        The check and the write are not atomic; see :meth:`create_thread`.
        """
        if self.lookup_thread(commit_id) is not None:
            logger.debug("Thread for commit %s already recorded", commit_id)
            return False
        self.create_thread(commit_id, subject, message_id)
        return True

    def lookup_thread(self, commit_id: str) -> Optional[ThreadRecord]:
        with self._session_factory() as db:
            row = db.get(Thread, commit_id)
            if row is None:
                logger.debug("No thread for commit %s", commit_id)
                return None
            return ThreadRecord(
                commit_id=row.commit_id,
                subject=row.subject,
                message_id=row.message_id,
            )
