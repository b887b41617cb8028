from __future__ import annotations

import logging
import os
import urllib.request
from dataclasses import dataclass

from services.api.app.models.notification import OrderNotification
from services.api.app.services.notify_base import (
    NotifierConfigError,
    NotifyResult,
    UrlOpen,
    notify_timeout_seconds,
    post_json,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _WebhookConfig:
    url: str
    timeout_seconds: float


class WebhookOrderNotifier:
    """POST the order notification as JSON to a single endpoint."""

    channel = "WEBHOOK"

    def __init__(self, config: _WebhookConfig, urlopen: UrlOpen = urllib.request.urlopen) -> None:
        self._config = config
        self._urlopen = urlopen

    @classmethod
    def from_env(cls) -> "WebhookOrderNotifier":
        url = os.getenv("TREELOT_NOTIFY_WEBHOOK_URL", "").strip()
        if not url:
            raise NotifierConfigError("TREELOT_NOTIFY_WEBHOOK_URL")
        return cls(_WebhookConfig(url=url, timeout_seconds=notify_timeout_seconds()))

    def send(self, notification: OrderNotification) -> NotifyResult:
        status, _ = post_json(
            self._config.url,
            notification.model_dump(mode="json"),
            timeout=self._config.timeout_seconds,
            urlopen=self._urlopen,
        )
        logger.info("Order %s notification webhook responded %s", notification.order_number, status)
        return NotifyResult(channel=self.channel, reference_id=None)
