"""Test harness: paste a payload and preview the mail it would produce."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from commitmail.dependencies import get_notifier
from commitmail.errors import CommitMailError
from commitmail.services.dispatch import dispatch
from commitmail.services.notifier import Notifier
from commitmail.templating import templates

router = APIRouter(prefix="/hook-test-harness", tags=["harness"])


@router.get("", response_class=HTMLResponse)
def harness_form(request: Request):
    return templates.TemplateResponse(
        request,
        "hook-test-harness.html",
        {"event_type": "push", "payload": ""},
    )


@router.post("", response_class=HTMLResponse)
async def harness_preview(
    request: Request,
    event_type: str = Form(...),
    payload: str = Form(""),
    notifier: Notifier = Depends(get_notifier),
):
    """Compose without delivering and without recording threads."""
    message = None
    error = None
    unhandled = False
    try:
        result = await run_in_threadpool(
            dispatch, event_type, payload.encode(), notifier, deliver=False
        )
        message = result.message
        unhandled = not result.handled
    except CommitMailError as exc:
        error = str(exc)

    return templates.TemplateResponse(
        request,
        "hook-test-harness.html",
        {
            "event_type": event_type,
            "payload": payload,
            "message": message,
            "error": error,
            "unhandled": unhandled,
        },
    )
