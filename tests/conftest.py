"""Shared fixtures: in-memory thread store and fake mail/markdown services."""

from __future__ import annotations

import html
import os
from zoneinfo import ZoneInfo

os.environ["DB_URL"] = "sqlite://"
os.environ["MAIL_RECIPIENT"] = "commits@example.com"
os.environ["GITHUB_WEBHOOK_SECRET"] = ""

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from commitmail.db import Base, make_engine  # noqa: E402
from commitmail import models  # noqa: E402,F401
from commitmail.errors import DeliveryError  # noqa: E402
from commitmail.services.notifier import Notifier  # noqa: E402
from commitmail.services.threads import ThreadStore  # noqa: E402
from commitmail.styles import Styles  # noqa: E402

PACIFIC = ZoneInfo("America/Los_Angeles")

SHA_1 = "deadbeefcafe0000000000000000000000000001"
SHA_2 = "0123456789abcdef000000000000000000000002"


class FakeRenderer:
    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    def render(self, body: str, context: str) -> str:
        self.calls.append((body, context))
        return f"<p>{html.escape(body, quote=False)}</p>"


class FakeTransport:
    def __init__(self, message_id: str = "msg-1", error: Exception | None = None):
        self.message_id = message_id
        self.error = error
        self.sent = []

    def deliver(self, message) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        return self.message_id


class FakeCommitSource:
    def __init__(self, commit=None, error: Exception | None = None):
        self.commit = commit
        self.error = error
        self.requests: list[tuple[str, str]] = []

    def get_commit(self, commits_url: str, sha: str):
        self.requests.append((commits_url, sha))
        if self.error is not None:
            raise self.error
        return self.commit


@pytest.fixture
def styles() -> Styles:
    return Styles.from_mapping(
        {
            "link": {"color": "#4078c0"},
            "commit": {"message": {"block": {"white-space": "pre-wrap"}}},
        }
    )


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def failing_transport() -> FakeTransport:
    return FakeTransport(error=DeliveryError("Mail provider error: 500"))


@pytest.fixture
def thread_store() -> ThreadStore:
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    yield ThreadStore(factory)
    engine.dispose()


@pytest.fixture
def notifier(renderer, transport, thread_store, styles) -> Notifier:
    return Notifier(
        renderer=renderer,
        transport=transport,
        threads=thread_store,
        styles=styles,
        tz=PACIFIC,
    )


def make_commit(**overrides) -> dict:
    commit = {
        "id": SHA_1,
        "message": "Fix the frobnicator\n\nIt was broken.",
        "url": f"https://github.com/owner/repo/commit/{SHA_1}",
        "timestamp": "2015-05-05T19:40:15-04:00",
        "added": [],
        "removed": [],
        "modified": ["README.md"],
        "author": {"username": "alice", "name": "Alice A.", "email": "alice@example.com"},
        "committer": {"username": "alice", "name": "Alice A.", "email": "alice@example.com"},
    }
    commit.update(overrides)
    return commit


def make_push(commits=None, **overrides) -> dict:
    payload = {
        "ref": "refs/heads/main",
        "compare": "https://github.com/owner/repo/compare/aaa...bbb",
        "pusher": {"name": "alice", "email": "alice@example.com"},
        "sender": {"login": "alice", "avatar_url": "https://avatars.example.com/alice.png"},
        "repository": {
            "full_name": "owner/repo",
            "html_url": "https://github.com/owner/repo",
            "pushed_at": 1430869215,
            "commits_url": "https://api.github.com/repos/owner/repo/commits{/sha}",
        },
        "commits": commits if commits is not None else [make_commit()],
    }
    payload.update(overrides)
    return payload


def make_comment(commit_id: str = SHA_1, **overrides) -> dict:
    payload = {
        "action": "created",
        "sender": {"login": "bob"},
        "repository": {
            "full_name": "owner/repo",
            "html_url": "https://github.com/owner/repo",
        },
        "comment": {
            "commit_id": commit_id,
            "body": "Looks good, see #12",
            "html_url": f"https://github.com/owner/repo/commit/{commit_id}#commitcomment-1",
            "updated_at": "2015-05-05T20:00:00Z",
            "user": {"login": "bob"},
        },
    }
    payload.update(overrides)
    return payload
