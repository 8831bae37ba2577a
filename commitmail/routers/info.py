"""Ruter Ingfo?"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from commitmail.timezone import TZ_NAME

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def health() -> str:
    """Health check."""
    return f"commitmail OK ({TZ_NAME})"
