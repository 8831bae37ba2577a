"""Centralized Jinja2 template configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))


def render_mail(name: str, **context: Any) -> str:
    """Render a mail body template to a string."""
    return templates.get_template(name).render(**context)
