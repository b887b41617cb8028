from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "treelot_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("TREELOT_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("TREELOT_NOTIFIER", "mock")

    from services.api.app.main import app
    from services.api.app.services import notify_mock

    notify_mock.outbox.clear()

    with TestClient(app) as c:
        yield c


@dataclass(frozen=True)
class SeededCatalog:
    species_id: str
    medium_variant_id: str
    stand_id: str
    wreath_id: str
    delivery_option_id: str


def seed_catalog(client: TestClient) -> SeededCatalog:
    """Fraser Fir at $20/ft (medium only), a $25 stand, a $15 small wreath, $25 delivery."""

    species = client.post("/v1/admin/species", json={"name": "Fraser Fir"})
    assert species.status_code == 201
    species_id = species.json()["id"]

    variants = client.get(f"/v1/admin/species/{species_id}/variants").json()
    medium = next(v for v in variants if v["fullness_type"] == "medium")
    resp = client.patch(
        f"/v1/admin/variants/{medium['id']}",
        json={"price_per_foot": "20.00", "available": True},
    )
    assert resp.status_code == 200

    stand = client.post("/v1/admin/stands", json={"name": "Classic Stand", "price": "25.00"})
    wreath = client.post("/v1/admin/wreaths", json={"size": "small", "price": "15.00"})
    delivery = client.post(
        "/v1/admin/delivery-options", json={"name": "Standard Delivery", "fee": "25.00"}
    )
    assert stand.status_code == wreath.status_code == delivery.status_code == 201

    return SeededCatalog(
        species_id=species_id,
        medium_variant_id=medium["id"],
        stand_id=stand.json()["id"],
        wreath_id=wreath.json()["id"],
        delivery_option_id=delivery.json()["id"],
    )


@pytest.fixture()
def catalog(client: TestClient) -> SeededCatalog:
    return seed_catalog(client)


def tomorrow() -> date:
    return date.today() + timedelta(days=1)


CONTACT = {
    "first_name": "Dana",
    "last_name": "Reyes",
    "email": "dana@example.com",
    "phone": "555-0100",
    "street": "12 Pine St",
    "unit": "",
    "city": "Portland",
    "state": "OR",
    "zip": "97201",
    "notes": "Leave by the gate",
}


def wizard_at_review(client: TestClient, catalog: SeededCatalog) -> str:
    """A wizard holding a 7 ft medium Fraser Fir, a small wreath and standard delivery."""

    sid = client.post("/v1/wizard").json()["session_id"]

    client.post(
        f"/v1/wizard/{sid}/trees",
        json={"species_id": catalog.species_id, "fullness": "medium", "height_feet": 7},
    )
    client.post(f"/v1/wizard/{sid}/next")
    client.post(f"/v1/wizard/{sid}/next")
    client.put(f"/v1/wizard/{sid}/delivery", json={"delivery_option_id": catalog.delivery_option_id})
    client.post(f"/v1/wizard/{sid}/next")
    client.post(f"/v1/wizard/{sid}/wreaths/{catalog.wreath_id}")
    client.post(f"/v1/wizard/{sid}/next")
    client.put(
        f"/v1/wizard/{sid}/schedule",
        json={"date": tomorrow().isoformat(), "time": "12:00 PM - 4:00 PM"},
    )
    client.post(f"/v1/wizard/{sid}/next")
    client.put(f"/v1/wizard/{sid}/contact", json=CONTACT)

    view = client.post(f"/v1/wizard/{sid}/next").json()
    assert view["step"] == "review"
    return sid
