"""Markdown rendering for commit messages and comments."""

from __future__ import annotations

import html
import logging
from typing import Protocol

from commitmail.errors import GitHubError
from commitmail.styles import Styles

logger = logging.getLogger(__name__)

BLOCK_STYLE = "commit.message.block"
LINK_STYLE = "link"


class MarkdownService(Protocol):
    def render_markdown(self, text: str, context: str) -> str: ...


class Renderer(Protocol):
    def render(self, body: str, context: str) -> str: ...


class MarkdownRenderer:
    """
    Render free text as mail-safe HTML.

    The text is escaped before it is sent because GitHub's markdown endpoint
    passes stray ``<``, ``>`` and ``&`` through. When the service fails the
    escaped text is returned in a single pre-wrapped block instead.
    """

    def __init__(self, service: MarkdownService, styles: Styles):
        self.service = service
        self.styles = styles

    def render(self, body: str, context: str) -> str:
        escaped = html.escape(body)
        try:
            rendered = self.service.render_markdown(escaped, context)
        except GitHubError as exc:
            logger.warning("Could not do markdown rendering, got error %s", exc)
            return self.fallback(escaped)
        return self.decorate(rendered)

    def fallback(self, escaped: str) -> str:
        return f'<div style="{self.styles.get(BLOCK_STYLE)}">{escaped}</div>'

    def decorate(self, rendered: str) -> str:
        block = self.styles.get(BLOCK_STYLE)
        rendered = rendered.replace("<a ", f'<a style="{self.styles.get(LINK_STYLE)}" ')
        # whitespace is preserved inside blocks...
        rendered = rendered.replace("<p>", f'<p style="{block}">')
        rendered = rendered.replace("<li>", f'<li style="{block}">')
        # ...so the newline after each <br> would show up twice
        return rendered.replace("<br>\n", "<br>")
