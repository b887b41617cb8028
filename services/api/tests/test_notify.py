from __future__ import annotations

import io
import json
import logging
import urllib.error
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from services.api.app.models.notification import (
    NotificationStand,
    NotificationTree,
    NotificationWreath,
    OrderNotification,
)
from services.api.app.services import notify_mock
from services.api.app.services.notify_base import NotifierConfigError, NotifierDeliveryError
from services.api.app.services.notify_email import render_body, render_subject
from services.api.app.services.notify_factory import get_order_notifier
from services.api.app.services.notify_mock import MockOrderNotifier
from services.api.app.services.notify_resend import ResendOrderNotifier
from services.api.app.services.notify_webhook import WebhookOrderNotifier


def _notification(notes: str | None = "Leave by the gate") -> OrderNotification:
    return OrderNotification(
        order_number="261201-ABC123",
        customer_name="Dana Reyes",
        customer_email="dana@example.com",
        customer_phone="555-0100",
        delivery_address="12 Pine St\nPortland, OR 97201",
        delivery_date="12/02/2026",
        delivery_time="Not specified",
        trees=[
            NotificationTree(
                species_name="Fraser Fir",
                height_feet=7.0,
                fullness="medium",
                quantity=1,
                unit_price=Decimal("140.00"),
                fresh_cut=True,
            )
        ],
        stands=[NotificationStand(name="Classic Stand", quantity=2, unit_price=Decimal("25.00"))],
        wreaths=[
            NotificationWreath(
                size="small", title="Small Wreath", quantity=1, unit_price=Decimal("15.00")
            )
        ],
        delivery_option="Standard Delivery",
        delivery_fee=Decimal("25.00"),
        total_amount=Decimal("230.00"),
        notes=notes,
    )


class _FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self._body = body

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc) -> None:
        return None

    def read(self) -> bytes:
        return self._body


class _RecordingOpener:
    def __init__(self, status: int = 200, body: bytes = b"{}") -> None:
        self.status = status
        self.body = body
        self.requests: list[tuple[object, dict, float]] = []

    def __call__(self, req, data: bytes, timeout: float) -> _FakeResponse:
        self.requests.append((req, json.loads(data), timeout))
        if self.status >= 400:
            raise urllib.error.HTTPError(
                req.full_url, self.status, "error", None, io.BytesIO(self.body)
            )
        return _FakeResponse(self.status, self.body)


def test_email_subject_and_sections() -> None:
    n = _notification()
    assert render_subject(n) == "New Order #261201-ABC123 - Dana Reyes"

    body = render_body(n)
    assert "CUSTOMER INFORMATION" in body
    assert "Fraser Fir - 7 ft (medium) × 1 - Fresh Cut" in body
    assert "Small Wreath × 1" in body
    assert "Stands Subtotal: $50.00" in body
    assert "Items Total: $205.00" in body
    assert "TOTAL: $230.00" in body
    assert "Preferred Time: Not specified" in body
    assert "SPECIAL INSTRUCTIONS" in body


def test_email_omits_instructions_without_notes() -> None:
    assert "SPECIAL INSTRUCTIONS" not in render_body(_notification(notes=None))


def test_factory_defaults_to_mock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TREELOT_NOTIFIER", raising=False)
    assert isinstance(get_order_notifier(), MockOrderNotifier)


def test_factory_rejects_unknown_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TREELOT_NOTIFIER", "pigeon")
    with pytest.raises(ValueError):
        get_order_notifier()


def test_factory_requires_webhook_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TREELOT_NOTIFIER", "webhook")
    monkeypatch.delenv("TREELOT_NOTIFY_WEBHOOK_URL", raising=False)
    with pytest.raises(NotifierConfigError) as exc:
        get_order_notifier()
    assert exc.value.setting == "TREELOT_NOTIFY_WEBHOOK_URL"


def test_factory_requires_resend_recipients(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TREELOT_NOTIFIER", "resend")
    monkeypatch.setenv("TREELOT_RESEND_API_KEY", "re_test")
    monkeypatch.setenv("TREELOT_NOTIFY_FROM", "orders@treelot.test")
    monkeypatch.setenv("TREELOT_NOTIFY_TO", " , ")
    with pytest.raises(NotifierConfigError):
        get_order_notifier()


def test_webhook_posts_json_with_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TREELOT_NOTIFY_WEBHOOK_URL", "https://hooks.treelot.test/orders")
    monkeypatch.setenv("TREELOT_NOTIFY_TIMEOUT_SECONDS", "3")
    opener = _RecordingOpener()

    notifier = WebhookOrderNotifier.from_env()
    notifier._urlopen = opener
    result = notifier.send(_notification())

    assert result.channel == "WEBHOOK"
    req, body, timeout = opener.requests[0]
    assert req.full_url == "https://hooks.treelot.test/orders"
    assert body["order_number"] == "261201-ABC123"
    assert body["total_amount"] == "230.00"
    assert timeout == 3.0


def test_webhook_error_status_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TREELOT_NOTIFY_WEBHOOK_URL", "https://hooks.treelot.test/orders")
    notifier = WebhookOrderNotifier.from_env()
    notifier._urlopen = _RecordingOpener(status=500, body=b"boom")

    with pytest.raises(NotifierDeliveryError) as exc:
        notifier.send(_notification())
    assert exc.value.status_code == 500
    assert exc.value.body == "boom"


def test_resend_sends_rendered_email(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TREELOT_RESEND_API_KEY", "re_test")
    monkeypatch.setenv("TREELOT_NOTIFY_FROM", "orders@treelot.test")
    monkeypatch.setenv("TREELOT_NOTIFY_TO", "staff@treelot.test, owner@treelot.test")
    opener = _RecordingOpener(body=b'{"id": "msg_123"}')

    notifier = ResendOrderNotifier.from_env()
    notifier._urlopen = opener
    result = notifier.send(_notification())

    assert result.reference_id == "msg_123"
    req, body, _ = opener.requests[0]
    assert req.get_header("Authorization") == "Bearer re_test"
    assert body["to"] == ["staff@treelot.test", "owner@treelot.test"]
    assert body["subject"].startswith("New Order #261201-ABC123")
    assert "TOTAL: $230.00" in body["text"]


def test_mock_outbox_keeps_only_recent_notifications() -> None:
    notify_mock.outbox.clear()
    notifier = MockOrderNotifier()
    for i in range(notify_mock.OUTBOX_LIMIT + 5):
        notifier.send(_notification().model_copy(update={"order_number": f"n-{i}"}))

    assert len(notify_mock.outbox) == notify_mock.OUTBOX_LIMIT
    assert notify_mock.outbox[0].order_number == "n-5"
    notify_mock.outbox.clear()


def test_mock_notifier_warns_at_startup(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    warnings = [
        r
        for r in caplog.get_records("setup")
        if r.name == "services.api.app.main" and r.levelno == logging.WARNING
    ]
    assert "TREELOT_NOTIFIER is mock" in warnings[0].getMessage()
