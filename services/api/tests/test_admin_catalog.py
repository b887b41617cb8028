from __future__ import annotations

from decimal import Decimal

from conftest import SeededCatalog
from fastapi.testclient import TestClient


def test_new_species_gets_variants_and_default_heights(client: TestClient) -> None:
    resp = client.post("/v1/admin/species", json={"name": "Noble Fir", "description": "Stiff"})
    assert resp.status_code == 201
    species_id = resp.json()["id"]

    variants = client.get(f"/v1/admin/species/{species_id}/variants").json()
    assert [v["fullness_type"] for v in variants] == ["thin", "medium", "full"]
    assert all(not v["available"] and Decimal(v["price_per_foot"]) == 0 for v in variants)

    heights = client.get(f"/v1/admin/species/{species_id}/heights").json()
    assert [h["height_feet"] for h in heights] == [5, 6, 7, 8, 9, 10]


def test_unknown_species_is_404(client: TestClient) -> None:
    assert client.get("/v1/admin/species/missing/variants").status_code == 404
    assert client.patch("/v1/admin/species/missing", json={"visible": False}).status_code == 404


def test_species_patch_only_touches_sent_fields(client: TestClient, catalog: SeededCatalog) -> None:
    resp = client.patch(f"/v1/admin/species/{catalog.species_id}", json={"visible": False})
    assert resp.status_code == 200
    data = resp.json()
    assert data["visible"] is False
    assert data["name"] == "Fraser Fir"


def test_duplicate_height_is_conflict(client: TestClient, catalog: SeededCatalog) -> None:
    url = f"/v1/admin/species/{catalog.species_id}/heights"
    assert client.post(url, json={"height_feet": 7}).status_code == 409

    added = client.post(url, json={"height_feet": 11.5, "price_per_foot": "22.00"})
    assert added.status_code == 201
    height_id = added.json()["id"]

    assert client.patch(f"/v1/admin/heights/{height_id}", json={"available": False}).json()[
        "available"
    ] is False
    assert client.delete(f"/v1/admin/heights/{height_id}").status_code == 204
    assert client.delete(f"/v1/admin/heights/{height_id}").status_code == 404


def test_duplicate_wreath_size_is_conflict(client: TestClient, catalog: SeededCatalog) -> None:
    resp = client.post("/v1/admin/wreaths", json={"size": "small", "price": "18.00"})
    assert resp.status_code == 409


def test_negative_price_is_rejected(client: TestClient) -> None:
    resp = client.post("/v1/admin/stands", json={"name": "Bad", "price": "-1"})
    assert resp.status_code == 422


def test_default_image_goes_on_medium_variant(client: TestClient, catalog: SeededCatalog) -> None:
    resp = client.put(
        f"/v1/admin/species/{catalog.species_id}/default-image",
        json={"image_url": "/images/fraser.jpg"},
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == catalog.medium_variant_id
    assert resp.json()["image_url"] == "/images/fraser.jpg"


def test_admin_lists_include_hidden_items(client: TestClient, catalog: SeededCatalog) -> None:
    client.patch(f"/v1/admin/stands/{catalog.stand_id}", json={"visible": False, "price": "30"})

    stands = client.get("/v1/admin/stands").json()
    assert len(stands) == 1
    assert stands[0]["visible"] is False
    assert Decimal(stands[0]["price"]) == Decimal("30")


def test_height_must_be_whole_or_half_foot(client: TestClient, catalog: SeededCatalog) -> None:
    url = f"/v1/admin/species/{catalog.species_id}/heights"
    assert client.post(url, json={"height_feet": 6.3, "price_per_foot": "20.00"}).status_code == 422

    heights = [h["height_feet"] for h in client.get(url).json()]
    assert 6.3 not in heights


def test_wreath_title_defaults_from_size(client: TestClient, catalog: SeededCatalog) -> None:
    medium = client.post("/v1/admin/wreaths", json={"size": "medium", "price": "25.00"})
    assert medium.status_code == 201
    assert medium.json()["title"] == "Medium Wreath"

    large = client.post(
        "/v1/admin/wreaths", json={"size": "large", "title": "Door Wreath", "price": "40.00"}
    )
    assert large.json()["title"] == "Door Wreath"

    resp = client.patch(f"/v1/admin/wreaths/{catalog.wreath_id}", json={"title": "Mini Wreath"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "Mini Wreath"
    assert resp.json()["size"] == "small"
    listed = {w["id"]: w["title"] for w in client.get("/v1/catalog/wreaths").json()}
    assert listed[catalog.wreath_id] == "Mini Wreath"
