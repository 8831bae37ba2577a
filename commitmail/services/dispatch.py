"""Route webhook deliveries to the push or commit-comment path."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from pydantic import BaseModel, ValidationError

from commitmail.errors import DecodeError
from commitmail.schemas import EVENT_MODELS, CommitCommentPayload, PushPayload
from commitmail.services.mailer import OutgoingEmail
from commitmail.services.notifier import Notifier

logger = logging.getLogger(__name__)

SENT = "sent"
PREVIEW = "preview"
UNHANDLED = "unhandled"

Payload = Union[PushPayload, CommitCommentPayload]


@dataclass
class DispatchResult:
    status: str
    event: str
    message_id: Optional[str] = None
    message: Optional[OutgoingEmail] = None

    @property
    def handled(self) -> bool:
        return self.status != UNHANDLED


def decode_payload(event: str, body: bytes) -> BaseModel:
    """
    Parse ``body`` into the model registered for ``event``.

    Unknown keys are ignored and missing keys stay ``None``; anything that is
    not a JSON object of the right shape raises :class:`DecodeError`.
    """
    model = EVENT_MODELS.get(event)
    if model is None:
        raise DecodeError(f"no payload model for event {event!r}")
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise DecodeError(f"invalid {event} payload: {exc}") from exc


def _senders(notifier: Notifier) -> dict[str, Callable[[Payload], str]]:
    return {"push": notifier.send_push, "commit_comment": notifier.send_comment}


def _composers(notifier: Notifier) -> dict[str, Callable[[Payload], OutgoingEmail]]:
    return {"push": notifier.compose_push, "commit_comment": notifier.compose_comment}


def dispatch(
    event: str,
    body: bytes,
    notifier: Notifier,
    *,
    deliver: bool = True,
) -> DispatchResult:
    """
    Handle one webhook delivery.

    With ``deliver=False`` the message is only composed: nothing is sent and
    no thread is recorded.
    """
    event_key = (event or "").lower()
    if event_key not in EVENT_MODELS:
        logger.warning("Unhandled event type: %s", event)
        return DispatchResult(status=UNHANDLED, event=event_key)

    payload = decode_payload(event_key, body)
    if not deliver:
        message = _composers(notifier)[event_key](payload)
        return DispatchResult(status=PREVIEW, event=event_key, message=message)

    message_id = _senders(notifier)[event_key](payload)
    return DispatchResult(status=SENT, event=event_key, message_id=message_id)
