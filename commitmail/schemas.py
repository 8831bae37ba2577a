"""Webhook payload schemas.

Every field is optional: GitHub omits fields freely, so absence is modelled as
``None`` and only turns into an error once a field is actually needed (see
:func:`require`).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from commitmail.errors import MalformedCommitError

T = TypeVar("T")


def require(value: Optional[T], field: str, context: str = "commit") -> T:
    """Return ``value`` or raise :class:`MalformedCommitError` when it is absent."""
    if value is None:
        raise MalformedCommitError(field, context)
    return value


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GitHubUser(_Payload):
    """A ``sender``/``user``/``owner`` object."""

    login: Optional[str] = None
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None


class Pusher(_Payload):
    """
    Who pushed.

    GitHub puts the username in ``name``; some senders add an explicit
    ``username`` next to a display ``name``.
    """

    username: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def login(self) -> Optional[str]:
        return self.username or self.name


class CommitAuthor(_Payload):
    """Author/committer of a webhook commit."""

    username: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None


class WebhookCommit(_Payload):
    """A commit as it appears in a push payload."""

    id: Optional[str] = None
    message: Optional[str] = None
    url: Optional[str] = None
    timestamp: Optional[datetime] = None
    distinct: Optional[bool] = None
    author: Optional[CommitAuthor] = None
    committer: Optional[CommitAuthor] = None
    added: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    modified: List[str] = Field(default_factory=list)

    @field_validator("added", "removed", "modified", mode="before")
    @classmethod
    def empty_paths_for_null(cls, value):
        # a null list means no files
        return [] if value is None else value


class WebhookRepository(_Payload):
    id: Optional[int] = None
    name: Optional[str] = None
    full_name: Optional[str] = None
    description: Optional[str] = None
    owner: Optional[GitHubUser] = None
    html_url: Optional[str] = None
    url: Optional[str] = None
    commits_url: Optional[str] = None
    default_branch: Optional[str] = None
    # push payloads send unix seconds, others ISO strings; pydantic takes both
    pushed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WebhookCommitComment(_Payload):
    id: Optional[int] = None
    user: Optional[GitHubUser] = None
    url: Optional[str] = None
    html_url: Optional[str] = None
    commit_id: Optional[str] = None
    body: Optional[str] = None
    path: Optional[str] = None
    line: Optional[int] = None
    position: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PushPayload(_Payload):
    """``push`` event."""

    ref: Optional[str] = None
    before: Optional[str] = None
    after: Optional[str] = None
    compare: Optional[str] = None
    created: Optional[bool] = None
    deleted: Optional[bool] = None
    forced: Optional[bool] = None
    commits: List[WebhookCommit] = Field(default_factory=list)
    head_commit: Optional[WebhookCommit] = None
    pusher: Optional[Pusher] = None
    sender: Optional[GitHubUser] = None
    repository: Optional[WebhookRepository] = None

    @field_validator("commits", mode="before")
    @classmethod
    def empty_commits_for_null(cls, value):
        return [] if value is None else value


class CommitCommentPayload(_Payload):
    """``commit_comment`` event."""

    action: Optional[str] = None
    comment: Optional[WebhookCommitComment] = None
    sender: Optional[GitHubUser] = None
    repository: Optional[WebhookRepository] = None


class ApiCommitAuthor(_Payload):
    name: Optional[str] = None
    date: Optional[datetime] = None


class ApiCommitGit(_Payload):
    message: Optional[str] = None
    author: Optional[ApiCommitAuthor] = None
    committer: Optional[ApiCommitAuthor] = None


class ApiCommitFile(_Payload):
    filename: Optional[str] = None
    status: Optional[str] = None


class ApiCommit(_Payload):
    """Response of the single-commit REST endpoint."""

    sha: Optional[str] = None
    html_url: Optional[str] = None
    commit: Optional[ApiCommitGit] = None
    author: Optional[GitHubUser] = None
    committer: Optional[GitHubUser] = None
    files: List[ApiCommitFile] = Field(default_factory=list)

    @field_validator("files", mode="before")
    @classmethod
    def empty_files_for_null(cls, value):
        return [] if value is None else value

    def to_webhook_commit(self) -> WebhookCommit:
        """Reshape into the push-payload commit so it can be displayed the same way."""
        git = self.commit or ApiCommitGit()
        git_author = git.author or ApiCommitAuthor()
        git_committer = git.committer or ApiCommitAuthor()
        groups: dict[str, list[str]] = {"added": [], "removed": [], "modified": []}
        for entry in self.files:
            if not entry.filename:
                continue
            status = entry.status if entry.status in ("added", "removed") else "modified"
            groups[status].append(entry.filename)
        return WebhookCommit(
            id=self.sha,
            message=git.message,
            url=self.html_url,
            timestamp=git_author.date,
            author=CommitAuthor(
                username=self.author.login if self.author else None,
                name=git_author.name,
            ),
            committer=CommitAuthor(
                username=self.committer.login if self.committer else None,
                name=git_committer.name,
            ),
            **groups,
        )


EVENT_MODELS: dict[str, type[_Payload]] = {
    "push": PushPayload,
    "commit_comment": CommitCommentPayload,
}
