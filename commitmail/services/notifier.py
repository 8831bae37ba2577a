"""Compose, deliver and thread notification mail for push and comment events."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional, Protocol

from commitmail.errors import GitHubError, MalformedCommitError
from commitmail.schemas import (
    ApiCommit,
    CommitCommentPayload,
    PushPayload,
    WebhookCommit,
    WebhookRepository,
    require,
)
from commitmail.services.display import (
    DisplayCommit,
    build_display_commit,
    format_time,
    safe_formatted_date,
    short_sha,
)
from commitmail.services.mailer import OutgoingEmail, Transport
from commitmail.services.markdown import Renderer
from commitmail.services.threads import ThreadStore
from commitmail.styles import Styles
from commitmail.templating import render_mail

logger = logging.getLogger(__name__)

REPLY_PREFIX = "Re: "
BRANCH_PREFIXES = ("refs/heads/", "refs/tags/")


class CommitSource(Protocol):
    def get_commit(self, commits_url: str, sha: str) -> ApiCommit: ...


def branch_name_from_ref(ref: str) -> str:
    for prefix in BRANCH_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return ref


def resolve_sender_name(pusher_username: str, commits: list[WebhookCommit]) -> str:
    """
    Find the pusher's display name among the commit authors and committers.

    The push payload only carries the username, but the pusher is usually one
    of the people in the commit list. Falls back to the username.
    """
    for commit in commits:
        for person in (commit.author, commit.committer):
            if person is not None and person.username == pusher_username and person.name:
                return person.name
    return pusher_username


def push_subject(repo_name: str, first: DisplayCommit) -> str:
    return f"[{repo_name}] {first.short_sha}: {first.title}"


def comment_subject(repo_name: str, commit_id: str, thread_subject: Optional[str]) -> str:
    if thread_subject:
        return REPLY_PREFIX + thread_subject
    return f"{REPLY_PREFIX}[{repo_name}] {short_sha(commit_id)}"


def _local_date(value: Optional[dt.datetime], tz: dt.tzinfo) -> tuple[str, str]:
    if value is None:
        return "", ""
    local = value.astimezone(tz)
    return safe_formatted_date(format_time(local)), format_time(local, full=True)


class Notifier:
    """
    Builds one :class:`OutgoingEmail` per event.

    ``compose_*`` are side-effect free apart from the markdown and commit
    lookups; ``send_*`` also deliver and, for pushes, record threads.
    """

    def __init__(
        self,
        *,
        renderer: Renderer,
        transport: Transport,
        threads: ThreadStore,
        styles: Styles,
        tz: dt.tzinfo,
        commit_source: Optional[CommitSource] = None,
    ):
        self.renderer = renderer
        self.transport = transport
        self.threads = threads
        self.styles = styles
        self.tz = tz
        self.commit_source = commit_source

    # push

    def compose_push(self, payload: PushPayload) -> OutgoingEmail:
        if not payload.commits:
            raise MalformedCommitError("commits", "push")
        repo = require(payload.repository, "repository", "push")
        repo_name = require(repo.full_name, "repository.full_name", "push")
        pusher = require(payload.pusher, "pusher", "push")
        pusher_username = require(pusher.login, "pusher.name", "push")

        commits = [
            build_display_commit(commit, payload.sender, repo, self.tz, self.renderer)
            for commit in payload.commits
        ]
        subject = push_subject(repo_name, commits[0])
        sender_name = resolve_sender_name(pusher_username, payload.commits)

        if len(commits) == 1:
            extension_url = commits[0].url
        else:
            extension_url = payload.compare or ""

        branch_name = branch_name_from_ref(payload.ref or "")
        repo_url = repo.html_url or f"https://github.com/{repo_name}"
        pushed_date, pushed_tooltip = _local_date(repo.pushed_at, self.tz)

        html_body = render_mail(
            "push.html",
            style=self.styles,
            payload=payload,
            commits=commits,
            pusher_name=sender_name,
            repo_name=repo_name,
            repo_url=repo_url,
            branch_name=branch_name,
            branch_url=f"{repo_url}/tree/{branch_name}",
            pushed_display_date=pushed_date,
            pushed_display_date_tooltip=pushed_tooltip,
            extension_url=extension_url,
        )
        return OutgoingEmail(
            sender_name=sender_name,
            sender_local=pusher_username,
            subject=subject,
            html_body=html_body,
        )

    def send_push(self, payload: PushPayload) -> str:
        message = self.compose_push(payload)
        message_id = self.transport.deliver(message)
        for commit in payload.commits:
            # a commit keeps the thread of the first push that carried it
            self.threads.create_thread_if_absent(
                require(commit.id, "id"), message.subject, message_id
            )
        return message_id

    # commit comment

    def compose_comment(self, payload: CommitCommentPayload) -> OutgoingEmail:
        comment = require(payload.comment, "comment", "commit_comment")
        commit_id = require(comment.commit_id, "comment.commit_id", "commit_comment")
        repo = require(payload.repository, "repository", "commit_comment")
        repo_name = require(repo.full_name, "repository.full_name", "commit_comment")

        commenter = None
        if comment.user is not None:
            commenter = comment.user.login
        if not commenter and payload.sender is not None:
            commenter = payload.sender.login
        commenter = require(commenter, "sender.login", "commit_comment")

        thread = self.threads.lookup_thread(commit_id)
        subject = comment_subject(repo_name, commit_id, thread.subject if thread else None)
        headers: dict[str, str] = {}
        if thread is not None:
            headers["In-Reply-To"] = thread.message_id

        body_html = ""
        if comment.body:
            body_html = self.renderer.render(comment.body, repo_name)

        commit = self._fetch_display_commit(repo, commit_id, payload)
        repo_url = repo.html_url or f"https://github.com/{repo_name}"
        comment_date, comment_tooltip = _local_date(
            comment.updated_at or comment.created_at, self.tz
        )

        html_body = render_mail(
            "comment.html",
            style=self.styles,
            payload=payload,
            commenter=commenter,
            repo_name=repo_name,
            repo_url=repo_url,
            short_sha=short_sha(commit_id),
            commit_url=commit.url if commit else f"{repo_url}/commit/{commit_id}",
            commit=commit,
            body_html=body_html,
            comment_url=comment.html_url,
            comment_path=comment.path,
            comment_line=comment.line,
            comment_display_date=comment_date,
            comment_display_date_tooltip=comment_tooltip,
        )
        return OutgoingEmail(
            sender_name=commenter,
            sender_local=commenter,
            subject=subject,
            html_body=html_body,
            headers=headers,
        )

    def send_comment(self, payload: CommitCommentPayload) -> str:
        return self.transport.deliver(self.compose_comment(payload))

    def _fetch_display_commit(
        self,
        repo: WebhookRepository,
        commit_id: str,
        payload: CommitCommentPayload,
    ) -> Optional[DisplayCommit]:
        if self.commit_source is None or not repo.commits_url:
            return None
        try:
            api_commit = self.commit_source.get_commit(repo.commits_url, commit_id)
            return build_display_commit(
                api_commit.to_webhook_commit(),
                payload.sender,
                repo,
                self.tz,
                self.renderer,
            )
        except (GitHubError, MalformedCommitError) as exc:
            logger.warning("Could not load commit %s for comment: %s", commit_id, exc)
            return None
