"""models for DBs"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String

from .db import Base
from .timezone import now_local


class Thread(Base):
    """
    The first notification sent about a commit.

    Later commit comments reply to ``message_id`` and reuse ``subject``.
    """

    __tablename__ = "threads"
    commit_id = Column(String, primary_key=True)
    subject = Column(String, nullable=False)
    message_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=now_local)
