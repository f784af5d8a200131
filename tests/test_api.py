"""
Permx API Tests

Group permission administration endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from permx.api.routes import get_root_manager, set_permission_manager
from permx.config import reset_config
from permx.main import app
from permx.permissions.manager import PermissionManager


@pytest.fixture
def manager(store, catalog):
    manager = PermissionManager(store, catalog)
    set_permission_manager(manager)
    yield manager
    set_permission_manager(None)


@pytest.fixture
def client(manager):
    return TestClient(app)


class TestPermissionAdministration:

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_permissions(self, client):
        response = client.get("/api/v1/permissions")

        assert response.status_code == 200
        assert [(p["module_id"], p["id"]) for p in response.json()] == [
            ("user", "view_profile"),
            ("admin", "manage_users"),
            ("content", "create_post"),
        ]

    def test_group_permissions(self, client):
        response = client.get("/api/v1/groups/members/permissions")

        assert response.status_code == 200
        records = {r["permissionId"]: r for r in response.json()}
        assert records["view_profile"]["defaultState"] == "Default - Allow"
        assert records["view_profile"]["currentState"] == ""
        assert records["create_post"]["moduleId"] == "content"

    def test_set_and_clear_state(self, client, store):
        url = "/api/v1/groups/members/permissions/content/create_post"

        response = client.put(url, json={"state": "allow"})
        assert response.status_code == 200
        assert response.json()["currentState"] == "allow"

        records = {r["permissionId"]: r for r in client.get("/api/v1/groups/members/permissions").json()}
        assert records["create_post"]["currentState"] == "allow"

        response = client.put(url, json={"state": ""})
        assert response.status_code == 200
        assert response.json()["currentState"] == ""
        assert len(store) == 0

    def test_unknown_permission(self, client):
        response = client.put(
            "/api/v1/groups/members/permissions/content/missing",
            json={"state": "allow"},
        )

        assert response.status_code == 404

    def test_fixed_group(self, client, store):
        response = client.put(
            "/api/v1/groups/admins/permissions/admin/manage_users",
            json={"state": "deny"},
        )

        assert response.status_code == 403
        assert len(store) == 0

    def test_invalid_state(self, client):
        response = client.put(
            "/api/v1/groups/members/permissions/content/create_post",
            json={"state": "maybe"},
        )

        assert response.status_code == 422


class TestDefaultManager:
    """Root manager built lazily from configuration."""

    @pytest.fixture(autouse=True)
    def configured(self, monkeypatch):
        monkeypatch.setenv("PERMX_STORE_BACKEND", "memory")
        monkeypatch.setenv("PERMX_MODULES", "conftest:ContentModule, conftest:staff_modules")
        set_permission_manager(None)
        reset_config()
        yield
        set_permission_manager(None)
        reset_config()

    def test_catalog_loaded_from_config(self):
        manager = get_root_manager()

        assert [(p.module_id, p.id) for p in manager.get_permissions()] == [
            ("content", "create_post"),
            ("user", "view_profile"),
            ("admin", "manage_users"),
        ]
        assert get_root_manager() is manager

    def test_endpoints_serve_configured_catalog(self):
        client = TestClient(app)

        response = client.get("/api/v1/permissions")
        assert [p["id"] for p in response.json()] == ["create_post", "view_profile", "manage_users"]

        response = client.put(
            "/api/v1/groups/members/permissions/content/create_post",
            json={"state": "allow"},
        )
        assert response.status_code == 200
        assert response.json()["currentState"] == "allow"
