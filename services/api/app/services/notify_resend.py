from __future__ import annotations

import json
import logging
import os
import urllib.request
from dataclasses import dataclass

from services.api.app.models.notification import OrderNotification
from services.api.app.services.notify_base import (
    NotifierConfigError,
    NotifierDeliveryError,
    NotifyResult,
    UrlOpen,
    notify_timeout_seconds,
    post_json,
)
from services.api.app.services.notify_email import render_body, render_subject

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


@dataclass(frozen=True, slots=True)
class _ResendConfig:
    api_key: str
    sender: str
    recipients: tuple[str, ...]
    timeout_seconds: float


class ResendOrderNotifier:
    """Email the staff inbox through the Resend API."""

    channel = "RESEND"

    def __init__(self, config: _ResendConfig, urlopen: UrlOpen = urllib.request.urlopen) -> None:
        self._config = config
        self._urlopen = urlopen

    @classmethod
    def from_env(cls) -> "ResendOrderNotifier":
        api_key = os.getenv("TREELOT_RESEND_API_KEY", "").strip()
        if not api_key:
            raise NotifierConfigError("TREELOT_RESEND_API_KEY")

        sender = os.getenv("TREELOT_NOTIFY_FROM", "").strip()
        if not sender:
            raise NotifierConfigError("TREELOT_NOTIFY_FROM")

        recipients = tuple(
            r.strip() for r in os.getenv("TREELOT_NOTIFY_TO", "").split(",") if r.strip()
        )
        if not recipients:
            raise NotifierConfigError("TREELOT_NOTIFY_TO")

        return cls(
            _ResendConfig(
                api_key=api_key,
                sender=sender,
                recipients=recipients,
                timeout_seconds=notify_timeout_seconds(),
            )
        )

    def send(self, notification: OrderNotification) -> NotifyResult:
        message = {
            "from": self._config.sender,
            "to": list(self._config.recipients),
            "subject": render_subject(notification),
            "text": render_body(notification),
        }

        try:
            _, raw = post_json(
                RESEND_EMAILS_URL,
                message,
                headers={"Authorization": f"Bearer {self._config.api_key}"},
                timeout=self._config.timeout_seconds,
                urlopen=self._urlopen,
            )
        except NotifierDeliveryError as e:
            logger.error("Resend API error for order %s: %s", notification.order_number, e.body)
            raise

        message_id = json.loads(raw).get("id") if raw else None
        logger.info("Order %s email sent (message id %s)", notification.order_number, message_id)
        return NotifyResult(channel=self.channel, reference_id=message_id)
