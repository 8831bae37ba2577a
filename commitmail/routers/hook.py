"""Router for GitHub webhook deliveries."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from commitmail.config import settings
from commitmail.dependencies import get_notifier
from commitmail.errors import DecodeError, DeliveryError, MalformedCommitError
from commitmail.services.dispatch import dispatch
from commitmail.services.notifier import Notifier
from commitmail.utils import gh_verify

logger = logging.getLogger(__name__)

router = APIRouter(tags=["github"])


@router.post("/hook", response_class=PlainTextResponse)
async def github_hook(
    request: Request,
    x_github_event: str | None = Header(None),
    x_hub_signature_256: str | None = Header(None),
    notifier: Notifier = Depends(get_notifier),
):
    """
    GitHub webhook endpoint.

    ``push`` and ``commit_comment`` deliveries become mail; other event types
    are acknowledged with 200 so GitHub does not mark the hook as failing.
    """
    body = await request.body()
    if settings.github_webhook_secret and not gh_verify(
        settings.github_webhook_secret, body, x_hub_signature_256
    ):
        raise HTTPException(401, "Invalid signature")

    event = x_github_event or "unknown"
    try:
        result = await run_in_threadpool(dispatch, event, body, notifier)
    except DecodeError as exc:
        logger.error("Error %s handling %s payload", exc, event)
        raise HTTPException(400, "Error decoding payload") from exc
    except MalformedCommitError as exc:
        logger.error("Error %s handling %s payload", exc, event)
        raise HTTPException(422, f"Error handling payload: {exc}") from exc
    except DeliveryError as exc:
        logger.error("Error %s handling %s payload", exc, event)
        raise HTTPException(502, "Could not send mail") from exc

    if not result.handled:
        return f"Unhandled event type: {event}"
    return "OK"
