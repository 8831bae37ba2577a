"""Outbound mail through a transactional-mail HTTP API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import httpx

from commitmail.config import settings
from commitmail.errors import DeliveryError

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 15

JSONDict = dict[str, Any]


@dataclass
class OutgoingEmail:
    """A rendered notification ready for delivery."""

    sender_name: str
    sender_local: str
    subject: str
    html_body: str
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.subject:
            raise ValueError("OutgoingEmail requires a non-empty subject")

    def sender_address(self, domain: str) -> str:
        return f"{self.sender_local}@{domain}"


class Transport(Protocol):
    def deliver(self, message: OutgoingEmail) -> str:
        """Send ``message`` and return the provider's message id."""


class HttpMailTransport:
    """
    Deliver through a Brevo-style ``/smtp/email`` endpoint.

    No retry is attempted; any failure surfaces as :class:`DeliveryError`.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        recipient: Optional[str] = None,
        sender_domain: Optional[str] = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_url = api_url or settings.mail_api_url
        self.api_key = api_key if api_key is not None else settings.mail_api_key
        self.recipient = recipient or settings.mail_recipient
        self.sender_domain = sender_domain or settings.mail_sender_domain
        self.timeout = timeout
        self._transport = transport

    def build_payload(self, message: OutgoingEmail) -> JSONDict:
        payload: JSONDict = {
            "sender": {
                "name": message.sender_name,
                "email": message.sender_address(self.sender_domain),
            },
            "to": [{"email": self.recipient}],
            "subject": message.subject,
            "htmlContent": message.html_body,
        }
        if message.headers:
            payload["headers"] = dict(message.headers)
        return payload

    def deliver(self, message: OutgoingEmail) -> str:
        if not self.recipient:
            raise DeliveryError("MAIL_RECIPIENT is not configured")
        headers = {
            "api-key": self.api_key or "",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                r = client.post(self.api_url, json=self.build_payload(message), headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Could not send mail: %s", exc)
            raise DeliveryError(f"mail request failed: {exc}") from exc
        if r.status_code >= 300:
            logger.error("Could not send mail [HTTP %s]: %s", r.status_code, r.text[:500])
            raise DeliveryError(f"Mail provider error: {r.status_code} {r.text}")
        try:
            data = r.json()
        except ValueError as exc:
            raise DeliveryError("mail provider returned a non-JSON response") from exc
        message_id = data.get("messageId") if isinstance(data, dict) else None
        if not message_id:
            raise DeliveryError("mail provider response carries no messageId")
        logger.info("Sent %r as %s", message.subject, message_id)
        return str(message_id)
