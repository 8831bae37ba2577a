"""Yet another GitHub REST client (markdown rendering and commit lookup)."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from commitmail.config import settings
from commitmail.errors import GitHubError
from commitmail.schemas import ApiCommit

GITHUB_API_BASE = "https://api.github.com"
HTTP_TIMEOUT_SECONDS = 15

JSONDict = dict[str, Any]


class GitHubClient:
    """Thin wrapper over the few endpoints the mailer needs."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.github_api_url or GITHUB_API_BASE).rstrip("/")
        self.token = token if token is not None else settings.github_token
        self.timeout = timeout
        self._transport = transport

    def _headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        headers = {"Accept": accept, "User-Agent": "commitmail"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def render_markdown(self, text: str, context: str, mode: str = "gfm") -> str:
        """
        Render ``text`` with GitHub's markdown endpoint.

        ``context`` is the ``owner/name`` used to resolve ``#123`` references.
        """
        payload: JSONDict = {"text": text, "mode": mode}
        if context:
            payload["context"] = context
        try:
            with self._client() as client:
                r = client.post(
                    f"{self.base_url}/markdown",
                    json=payload,
                    headers=self._headers("text/html"),
                )
        except httpx.HTTPError as exc:
            raise GitHubError(f"markdown request failed: {exc}") from exc
        if r.status_code >= 300:
            raise GitHubError(f"GitHub error: {r.status_code} {r.text}")
        return r.text

    def get_commit(self, commits_url: str, sha: str) -> ApiCommit:
        """Fetch one commit through the repository's ``commits_url`` template."""
        url = expand_commits_url(commits_url, sha)
        try:
            with self._client() as client:
                r = client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise GitHubError(f"commit request failed: {exc}") from exc
        if r.status_code >= 300:
            raise GitHubError(f"GitHub error: {r.status_code} {r.text}")
        try:
            return ApiCommit.model_validate(r.json())
        except ValueError as exc:
            raise GitHubError(f"unexpected commit response: {exc}") from exc


def expand_commits_url(template: str, sha: str) -> str:
    """
    Fill the ``{/sha}`` placeholder of a hypermedia URL template.

    Example
    -------
    'https://api.github.com/repos/o/r/commits{/sha}' → '.../commits/<sha>'
    """
    if "{/sha}" in template:
        return template.replace("{/sha}", f"/{sha}")
    return f"{template.rstrip('/')}/{sha}"
