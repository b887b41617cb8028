from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from services.api.app.models.notification import OrderNotification

# Matches urllib.request.urlopen; tests swap in a fake.
UrlOpen = Callable[..., Any]


class NotifierError(Exception):
    """Base class for order notification errors."""


class NotifierConfigError(NotifierError, ValueError):
    def __init__(self, setting: str) -> None:
        super().__init__(f"{setting} is required for the configured TREELOT_NOTIFIER")
        self.setting = setting


class NotifierDeliveryError(NotifierError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Notification endpoint returned {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True, slots=True)
class NotifyResult:
    channel: str
    reference_id: str | None = None


class OrderNotifier(Protocol):
    channel: str

    def send(self, notification: OrderNotification) -> NotifyResult: ...


def notify_timeout_seconds() -> float:
    return float(os.getenv("TREELOT_NOTIFY_TIMEOUT_SECONDS", "10"))


def post_json(
    url: str,
    body: dict,
    *,
    headers: dict[str, str] | None = None,
    timeout: float,
    urlopen: UrlOpen = urllib.request.urlopen,
) -> tuple[int, str]:
    """POST a JSON body and return (status, response text).

    HTTP error statuses raise NotifierDeliveryError; connection failures and timeouts
    propagate from urllib.
    """

    req = urllib.request.Request(url, method="POST")
    req.add_header("Content-Type", "application/json")
    for name, value in (headers or {}).items():
        req.add_header(name, value)

    try:
        with urlopen(req, data=json.dumps(body).encode("utf-8"), timeout=timeout) as resp:
            return resp.status, resp.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace")
        raise NotifierDeliveryError(e.code, raw) from e
