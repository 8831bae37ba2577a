"""the database wiring."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from commitmail.config import settings


def make_engine(url: str):
    """
    Build an engine for ``url``.

    In-memory SQLite gets a single shared connection so every session sees
    the same database.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url)


engine = make_engine(settings.db_url)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def init_db(bind=None) -> None:
    """Create missing tables."""
    # models must be imported so their tables are registered on Base
    from commitmail import models  # noqa: F401

    Base.metadata.create_all(bind or engine)
