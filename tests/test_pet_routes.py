"""Tests for the pet catalog routes.

Routes run against the in-memory FakeCatalogStore from conftest.py; admin
writes authenticate with the ``admin_headers`` fixture.
"""

import pytest
from fastapi.testclient import TestClient

from petvalues.core.app_factory import create_app
from petvalues.core.config import settings

UPDATE_BODY = {
    "name": "Golden Dragon",
    "rarity": "Mythic",
    "stats": "500",
    "stats_type": "value",
    "value_normal": "10",
    "value_golden": "25",
    "value_rainbow": "60",
    "image_url": "https://cdn.example.com/dragon.png",
}


@pytest.fixture
def client(fake_store) -> TestClient:
    fake_store.add_pet(name="Dog", rarity="Common", stats="1", value=5, value_normal="1")
    fake_store.add_pet(name="Dragon", rarity="Legendary", stats="300", value=90, value_normal="9")
    app = create_app(store=fake_store)
    with TestClient(app) as test_client:
        yield test_client


class TestPublicReads:
    def test_list_pets_sorted_by_value_with_cache_header(self, client: TestClient) -> None:
        response = client.get("/api/pets")

        assert response.status_code == 200
        assert [pet["name"] for pet in response.json()] == ["Dragon", "Dog"]
        assert response.headers["Cache-Control"] == settings.app.public_cache_control

    def test_get_single_pet(self, client: TestClient) -> None:
        response = client.get("/api/pets/1")

        assert response.status_code == 200
        assert response.json()["name"] == "Dog"

    def test_get_missing_pet_returns_404(self, client: TestClient) -> None:
        response = client.get("/api/pets/999")

        assert response.status_code == 404
        assert response.json()["error"] == "Pet not found"

    def test_non_numeric_id_returns_400(self, client: TestClient) -> None:
        response = client.get("/api/pets/abc")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid pet ID"

    def test_online_count(self, client: TestClient) -> None:
        response = client.get("/api/online")

        assert response.status_code == 200
        assert response.json() == {"count": settings.app.online_count}
        assert "s-maxage=1800" in response.headers["Cache-Control"]


class TestAdminAuthentication:
    def test_missing_credentials_return_401(self, client: TestClient) -> None:
        response = client.put("/api/pets/1", json=UPDATE_BODY)

        assert response.status_code == 401
        assert response.json()["error"] == "Missing credentials"

    def test_wrong_credentials_return_401(self, client: TestClient) -> None:
        response = client.delete(
            "/api/pets/1",
            headers={"X-Admin-Username": "admin", "X-Admin-Password": "nope"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    def test_invalid_id_checked_before_credentials(self, client: TestClient) -> None:
        response = client.delete("/api/pets/xyz")

        assert response.status_code == 400


class TestUpdatePet:
    def test_update_writes_row_and_audit_diff(self, client: TestClient, fake_store, admin_headers) -> None:
        response = client.put("/api/pets/2", json=UPDATE_BODY, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Golden Dragon"
        assert "updated_at" in body

        entry = fake_store.audit_log[-1]
        assert entry["action_type"] == "EDIT"
        assert entry["username"] == "admin"
        assert entry["pet_id"] == 2
        assert entry["changes"]["name"] == {"from": "Dragon", "to": "Golden Dragon"}
        assert entry["changes"]["image_url"] == {"from": "none", "to": "changed"}
        assert "stats_type" in entry["changes"]

    def test_update_requires_name_and_rarity(self, client: TestClient, fake_store, admin_headers) -> None:
        response = client.put("/api/pets/1", json={"name": "Dog"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Name and rarity are required"
        assert fake_store.audit_log == []

    def test_update_missing_pet_returns_404(self, client: TestClient, admin_headers) -> None:
        response = client.put("/api/pets/42", json=UPDATE_BODY, headers=admin_headers)

        assert response.status_code == 404

    def test_update_without_service_key_returns_500(
        self, client: TestClient, fake_store, admin_headers
    ) -> None:
        fake_store.admin_access = False

        response = client.put("/api/pets/1", json=UPDATE_BODY, headers=admin_headers)

        assert response.status_code == 500
        assert response.json()["error"] == "Server configuration error"


class TestCreateAndDelete:
    def test_create_applies_defaults_and_audits(self, client: TestClient, fake_store, admin_headers) -> None:
        response = client.post(
            "/api/pets",
            json={"name": "Cat", "rarity": "Rare"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["stats"] == "0"
        assert body["stats_type"] == "value"
        assert body["image_url"] is None
        assert fake_store.audit_log[-1]["action_type"] == "CREATE"
        assert fake_store.audit_log[-1]["pet_name"] == "Cat"

    def test_delete_removes_pet_and_audits_snapshot(
        self, client: TestClient, fake_store, admin_headers
    ) -> None:
        response = client.delete("/api/pets/1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Pet deleted"}
        assert 1 not in fake_store.pets
        entry = fake_store.audit_log[-1]
        assert entry["action_type"] == "DELETE"
        assert entry["changes"]["deleted_pet"]["name"] == "Dog"

    def test_delete_missing_pet_succeeds_without_audit(
        self, client: TestClient, fake_store, admin_headers
    ) -> None:
        response = client.delete("/api/pets/77", headers=admin_headers)

        assert response.status_code == 200
        assert fake_store.audit_log == []


def test_cors_preflight_allows_admin_headers(client: TestClient) -> None:
    response = client.options(
        "/api/pets/1",
        headers={
            "Origin": "https://admin.example.com",
            "Access-Control-Request-Method": "PUT",
            "Access-Control-Request-Headers": "X-Admin-Username, X-Admin-Password",
        },
    )

    assert response.status_code == 200
    allowed = response.headers["Access-Control-Allow-Headers"].lower()
    assert "x-admin-username" in allowed
    assert "x-admin-password" in allowed


def test_health_reports_admin_writes(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "admin_writes": True}
