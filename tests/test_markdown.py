"""Markdown rendering: escaping, style injection, degraded fallback."""

from __future__ import annotations

import logging

from commitmail.errors import GitHubError
from commitmail.services.markdown import MarkdownRenderer


class StubService:
    def __init__(self, response: str = "", error: Exception | None = None):
        self.response = response
        self.error = error
        self.requests: list[tuple[str, str]] = []

    def render_markdown(self, text: str, context: str) -> str:
        self.requests.append((text, context))
        if self.error is not None:
            raise self.error
        return self.response


def test_text_is_escaped_before_submission(styles):
    service = StubService("<p>ok</p>")
    MarkdownRenderer(service, styles).render("a < b & c > d", "owner/repo")
    assert service.requests == [("a &lt; b &amp; c &gt; d", "owner/repo")]


def test_styles_are_injected_into_rendered_markup(styles):
    service = StubService(
        '<p>see <a href="https://x">#1</a><br>\nnext</p>\n<ul>\n<li>one</li>\n</ul>'
    )
    html = MarkdownRenderer(service, styles).render("see #1", "owner/repo")
    assert html == (
        '<p style="white-space:pre-wrap;">see '
        '<a style="color:#4078c0;" href="https://x">#1</a><br>next</p>\n'
        '<ul>\n<li style="white-space:pre-wrap;">one</li>\n</ul>'
    )


def test_service_failure_falls_back_to_escaped_block(styles, caplog):
    service = StubService(error=GitHubError("GitHub error: 503"))
    with caplog.at_level(logging.WARNING, logger="commitmail.services.markdown"):
        html = MarkdownRenderer(service, styles).render("<b>bold</b>", "owner/repo")
    assert html == '<div style="white-space:pre-wrap;">&lt;b&gt;bold&lt;/b&gt;</div>'
    assert "Could not do markdown rendering" in caplog.text


def test_quotes_are_escaped_before_submission(styles):
    service = StubService("<p>ok</p>")
    MarkdownRenderer(service, styles).render("""say "hi" and 'bye'""", "owner/repo")
    assert service.requests == [("say &quot;hi&quot; and &#x27;bye&#x27;", "owner/repo")]
