"""Presentation model for commits in notification mail."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Optional, Tuple

from commitmail.schemas import GitHubUser, WebhookCommit, WebhookRepository, require
from commitmail.services.markdown import Renderer

TITLE_LIMIT = 80
ELLIPSIS = "…"
SHORT_SHA_LENGTH = 7
IDENTICON_URL = "https://github.com/identicons/{login}.png"

ZERO_WIDTH_SPACE = "\u200b"

ADDED = "added"
REMOVED = "removed"
MODIFIED = "modified"

_FILE_LETTERS = {ADDED: "+", REMOVED: "-", MODIFIED: "•"}


def safe_formatted_date(date: str) -> str:
    """
    Break up a formatted date with zero-width spaces.

    Keeps Apple Data Detectors and Gmail's event detection from turning the
    date into a calendar link.
    """
    out = []
    length = len(date)
    for i in range(0, length, 2):
        if i == length - 1:
            out.append(date[i])
            continue
        out.append(date[i : i + 2])
        if date[i] != " " and date[i + 1] != " " and i < length - 2:
            out.append(ZERO_WIDTH_SPACE)
    return "".join(out)


def format_time(value: dt.datetime, *, full: bool = False) -> str:
    """``3:04pm``, or ``Monday January 2 3:04pm`` when ``full``."""
    hour = value.hour % 12 or 12
    meridiem = "am" if value.hour < 12 else "pm"
    clock = f"{hour}:{value.minute:02d}{meridiem}"
    if not full:
        return clock
    return f"{value:%A} {value:%B} {value.day} {clock}"


@dataclass(frozen=True)
class DisplayFile:
    path: str
    kind: str
    url: str = ""

    @property
    def style_name(self) -> str:
        kind = self.kind if self.kind in _FILE_LETTERS else "unknown"
        return f"commit.files.file.type.{kind}"

    @property
    def letter(self) -> str:
        return _FILE_LETTERS.get(self.kind, "?")


@dataclass(frozen=True)
class DisplayCommitter:
    login: str
    name: str
    avatar_url: str


@dataclass(frozen=True)
class DisplayCommit:
    sha: str
    short_sha: str
    url: str
    title: str
    message_html: str
    date: Optional[dt.datetime]
    committer: DisplayCommitter
    files: Tuple[DisplayFile, ...] = field(default_factory=tuple)

    @property
    def display_date(self) -> str:
        if self.date is None:
            return ""
        return safe_formatted_date(format_time(self.date))

    @property
    def display_date_tooltip(self) -> str:
        if self.date is None:
            return ""
        return format_time(self.date, full=True)


def short_sha(sha: str) -> str:
    return sha[:SHORT_SHA_LENGTH]


def split_title(message: str) -> Tuple[str, str]:
    """
    Split a commit message into title and body.

    Long titles are cut at the same point as GitHub's web UI: the first 80
    characters plus an ellipsis, with the rest pushed to the start of the body.
    """
    title, _, body = message.partition("\n")
    if len(title) > TITLE_LIMIT:
        tail = title[TITLE_LIMIT:]
        body = f"{tail}\n{body}" if body else tail
        title = title[:TITLE_LIMIT] + ELLIPSIS
    return title, body


def classify_files(commit: WebhookCommit, commit_url: str) -> Tuple[DisplayFile, ...]:
    files = [DisplayFile(path, ADDED) for path in commit.added]
    files += [DisplayFile(path, REMOVED) for path in commit.removed]
    files += [DisplayFile(path, MODIFIED) for path in commit.modified]
    files.sort(key=lambda f: f.path)
    return tuple(
        DisplayFile(f.path, f.kind, f"{commit_url}#diff-{i}") for i, f in enumerate(files)
    )


def resolve_avatar_url(login: str, sender: Optional[GitHubUser]) -> str:
    """
    Pick the avatar shown next to a commit.

    An identicon is generated from the login; the event sender's real avatar
    wins when the sender is that same login.
    """
    avatar = IDENTICON_URL.format(login=login)
    if sender is not None and sender.login == login and sender.avatar_url:
        avatar = sender.avatar_url
    return avatar


def build_display_commit(
    commit: WebhookCommit,
    sender: Optional[GitHubUser],
    repo: Optional[WebhookRepository],
    tz: dt.tzinfo,
    renderer: Renderer,
) -> DisplayCommit:
    """Turn a webhook commit into its display form; raises on missing fields."""
    message = require(commit.message, "message")
    sha = require(commit.id, "id")
    url = require(commit.url, "url")
    author = require(commit.author, "author")
    login = require(author.username, "author.username")
    # an undated commit is still shown, just without its date
    date = commit.timestamp.astimezone(tz) if commit.timestamp is not None else None

    title, body = split_title(message)
    message_html = ""
    if body:
        context = (repo.full_name if repo else None) or ""
        message_html = renderer.render(body, context)

    return DisplayCommit(
        sha=sha,
        short_sha=short_sha(sha),
        url=url,
        title=title,
        message_html=message_html,
        date=date,
        committer=DisplayCommitter(
            login=login,
            name=author.name or login,
            avatar_url=resolve_avatar_url(login, sender),
        ),
        files=classify_files(commit, url),
    )
