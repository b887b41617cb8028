from __future__ import annotations

import os

from services.api.app.services.notify_base import OrderNotifier
from services.api.app.services.notify_mock import MockOrderNotifier


def notifier_mode() -> str:
    return os.getenv("TREELOT_NOTIFIER", "mock").strip().lower()


def get_order_notifier() -> OrderNotifier:
    """Select the order notifier based on env vars.

    Defaults to the mock notifier so tests and local dev never send real mail unless
    explicitly configured otherwise.
    """

    mode = notifier_mode()

    if mode == "mock":
        return MockOrderNotifier()

    if mode == "webhook":
        from services.api.app.services.notify_webhook import WebhookOrderNotifier

        return WebhookOrderNotifier.from_env()

    if mode == "resend":
        from services.api.app.services.notify_resend import ResendOrderNotifier

        return ResendOrderNotifier.from_env()

    raise ValueError(f"Unknown TREELOT_NOTIFIER={mode!r}. Expected mock, webhook or resend.")
