"""Errors raised while turning webhook events into mail."""

from __future__ import annotations


class CommitMailError(Exception):
    """Base class for processing failures."""


class DecodeError(CommitMailError):
    """The payload is not well-formed JSON of the expected shape."""


class MalformedCommitError(CommitMailError):
    """A field needed to build the notification is missing."""

    def __init__(self, field: str, context: str = "commit"):
        self.field = field
        self.context = context
        super().__init__(f"{context} is missing required field {field!r}")


class GitHubError(CommitMailError):
    """A GitHub API call failed."""


class DeliveryError(CommitMailError):
    """The mail provider did not accept the message."""
