"""FastAPI dependencies wiring the notifier to its collaborators."""

from __future__ import annotations

from functools import lru_cache

from commitmail.config import settings
from commitmail.db import SessionLocal
from commitmail.services.github import GitHubClient
from commitmail.services.mailer import HttpMailTransport
from commitmail.services.markdown import MarkdownRenderer
from commitmail.services.notifier import Notifier
from commitmail.services.threads import ThreadStore
from commitmail.styles import Styles
from commitmail.timezone import TZ


@lru_cache(maxsize=1)
def get_styles() -> Styles:
    return Styles.load(settings.styles_path)


@lru_cache(maxsize=1)
def get_notifier() -> Notifier:
    """
    Build the process-wide notifier.

    Overridden in tests through ``app.dependency_overrides``.
    """
    styles = get_styles()
    github = GitHubClient(timeout=settings.http_timeout_seconds)
    return Notifier(
        renderer=MarkdownRenderer(github, styles),
        transport=HttpMailTransport(timeout=settings.http_timeout_seconds),
        threads=ThreadStore(SessionLocal),
        styles=styles,
        tz=TZ,
        commit_source=github,
    )
