from __future__ import annotations

import threading
import time
from decimal import Decimal

import pytest
from conftest import CONTACT, SeededCatalog, tomorrow, wizard_at_review
from fastapi.testclient import TestClient
from packages.shared.schemas.catalog_v1 import FullnessV1
from services.api.app.db.database import db_session
from services.api.app.db.models import Order, OrderEvent, OrderTree
from services.api.app.models.draft import ContactInfo, DeliverySelection, OrderDraft, TreeItem
from services.api.app.services import notify_mock
from services.api.app.services.pricing import compute_totals
from services.api.app.services.store import store
from services.api.app.services.submission import (
    DraftIncompleteError,
    OrderSubmissionError,
    build_notification,
    submit_order,
)


def test_end_to_end_order(client: TestClient, catalog: SeededCatalog) -> None:
    sid = wizard_at_review(client, catalog)
    review = client.get(f"/v1/wizard/{sid}").json()
    assert review["totals"]["grand_total"] == "180.00"

    resp = client.post(f"/v1/wizard/{sid}/submit")
    assert resp.status_code == 200
    view = resp.json()
    assert view["step"] == "confirmation"
    assert view["order_number"]
    assert view["can_go_back"] is False
    assert view["totals"] == review["totals"]

    orders = client.get("/v1/admin/orders").json()
    assert len(orders) == 1
    order = orders[0]
    assert order["order_number"] == view["order_number"]
    assert order["status"] == "pending"
    assert Decimal(order["total_amount"]) == Decimal("180.00")
    assert Decimal(order["delivery_fee"]) == Decimal("25.00")
    assert order["preferred_delivery_date"] == tomorrow().isoformat()
    assert order["delivery_unit"] is None
    assert len(order["trees"]) == 1
    assert len(order["wreaths"]) == 1
    assert order["stands"] == []
    assert Decimal(order["trees"][0]["unit_price"]) == Decimal("140.00")

    assert len(notify_mock.outbox) == 1
    sent = notify_mock.outbox[0]
    assert sent.order_number == view["order_number"]
    assert sent.customer_name == "Dana Reyes"
    assert sent.delivery_address == "12 Pine St\nPortland, OR 97201"
    assert sent.delivery_date == tomorrow().strftime("%m/%d/%Y")
    assert sent.total_amount == Decimal("180.00")
    assert [w.title for w in sent.wreaths] == ["Small Wreath"]

    events = client.get(f"/v1/admin/orders/{order['id']}/events").json()
    assert {e["event_type"] for e in events} == {"ORDER_CREATED", "NOTIFICATION_SENT"}


def test_submitted_wizard_is_locked(client: TestClient, catalog: SeededCatalog) -> None:
    sid = wizard_at_review(client, catalog)
    assert client.post(f"/v1/wizard/{sid}/submit").status_code == 200

    assert client.post(f"/v1/wizard/{sid}/submit").status_code == 409
    assert client.post(f"/v1/wizard/{sid}/back").status_code == 409
    assert client.post(f"/v1/wizard/{sid}/own-stand").status_code == 409
    assert len(client.get("/v1/admin/orders").json()) == 1


class _BrokenNotifier:
    channel = "BROKEN"

    def send(self, notification):
        raise RuntimeError("smtp down")


def test_notification_failure_still_confirms(
    client: TestClient, catalog: SeededCatalog, monkeypatch: pytest.MonkeyPatch
) -> None:
    import services.api.app.routers.wizard as wizard_router

    monkeypatch.setattr(wizard_router, "get_order_notifier", lambda: _BrokenNotifier())

    sid = wizard_at_review(client, catalog)
    resp = client.post(f"/v1/wizard/{sid}/submit")
    assert resp.status_code == 200
    assert resp.json()["step"] == "confirmation"

    order_id = client.get("/v1/admin/orders").json()[0]["id"]
    events = client.get(f"/v1/admin/orders/{order_id}/events").json()
    failed = [e for e in events if e["event_type"] == "NOTIFICATION_FAILED"]
    assert failed[0]["payload"]["error"] == "smtp down"


def test_misconfigured_notifier_still_confirms(
    client: TestClient, catalog: SeededCatalog, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TREELOT_NOTIFIER", "webhook")
    monkeypatch.delenv("TREELOT_NOTIFY_WEBHOOK_URL", raising=False)

    sid = wizard_at_review(client, catalog)
    assert client.post(f"/v1/wizard/{sid}/submit").json()["step"] == "confirmation"
    assert len(notify_mock.outbox) == 0


def _draft(catalog: SeededCatalog, tree: TreeItem) -> OrderDraft:
    return OrderDraft(
        trees=(tree,),
        delivery=DeliverySelection(id=catalog.delivery_option_id, name="Standard Delivery", fee=Decimal("25")),
        contact=ContactInfo(**CONTACT),
    )


def test_failed_line_item_write_rolls_back_header(client: TestClient, catalog: SeededCatalog) -> None:
    # Bypass validation to get a row the quantity check constraint refuses.
    bad_tree = TreeItem.model_construct(
        species_id=catalog.species_id,
        species_name="Fraser Fir",
        fullness=FullnessV1.MEDIUM,
        height_feet=7.0,
        price_per_foot=Decimal("20"),
        quantity=0,
        fresh_cut=False,
        image_url="",
    )

    db = db_session()
    try:
        with pytest.raises(OrderSubmissionError) as exc:
            submit_order(db, _draft(catalog, bad_tree), notify_mock.MockOrderNotifier())
        assert exc.value.stage == "order items"

        assert db.query(Order).count() == 0
        assert db.query(OrderTree).count() == 0
        assert db.query(OrderEvent).count() == 0
    finally:
        db.close()

    assert len(notify_mock.outbox) == 0


def test_incomplete_draft_is_refused(client: TestClient, catalog: SeededCatalog) -> None:
    db = db_session()
    try:
        with pytest.raises(DraftIncompleteError) as exc:
            submit_order(db, OrderDraft(), notify_mock.MockOrderNotifier())
        assert "trees" in exc.value.missing
        assert "delivery" in exc.value.missing
        assert "contact.zip" in exc.value.missing
    finally:
        db.close()


def test_concurrent_submits_place_one_order(client: TestClient, catalog: SeededCatalog) -> None:
    sid = wizard_at_review(client, catalog)
    statuses: list[int] = []

    def _submit() -> None:
        statuses.append(client.post(f"/v1/wizard/{sid}/submit").status_code)

    threads = [threading.Thread(target=_submit) for _ in range(2)]
    # Hold the session lock so both requests are in flight before either submits.
    with store.session_lock(sid):
        for t in threads:
            t.start()
        time.sleep(0.2)
        assert statuses == []
    for t in threads:
        t.join(timeout=10)

    assert sorted(statuses) == [200, 409]
    assert len(client.get("/v1/admin/orders").json()) == 1
    assert len(notify_mock.outbox) == 1


def _tree() -> TreeItem:
    return TreeItem(
        species_id="sp-1",
        species_name="Fraser Fir",
        fullness=FullnessV1.MEDIUM,
        height_feet=7,
        price_per_foot=Decimal("20"),
        quantity=1,
    )


def test_notification_trims_contact_fields() -> None:
    padded = ContactInfo(**{name: f"  {value}  " for name, value in CONTACT.items()})
    draft = OrderDraft(
        trees=(_tree(),),
        delivery=DeliverySelection(id="d-1", name="Standard Delivery", fee=Decimal("25")),
        contact=padded,
    )

    n = build_notification("261201-ABC123", draft, compute_totals(draft))
    assert n.customer_name == "Dana Reyes"
    assert n.customer_email == "dana@example.com"
    assert n.customer_phone == "555-0100"
    assert n.notes == "Leave by the gate"


def test_notification_without_delivery_is_refused() -> None:
    draft = OrderDraft(trees=(_tree(),), contact=ContactInfo(**CONTACT))
    with pytest.raises(DraftIncompleteError) as exc:
        build_notification("261201-ABC123", draft, compute_totals(draft))
    assert exc.value.missing == ["delivery"]
