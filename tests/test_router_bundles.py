"""Tests for bundleconsole.server.routers.bundles module.

Version: 0.1.0

Exercises the bundle endpoints through the FastAPI test client against a
snapshot registry.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bundleconsole.config import ConsoleConfig
from bundleconsole.server.api import create_app


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config():
    config = ConsoleConfig()
    config.framework.boot_delegation = "sun.*,com.acme.util"
    return config


@pytest.fixture
def client(config, registry):
    app = create_app(config, registry=registry)
    return TestClient(app)


@pytest.fixture
def secured_client(registry):
    config = ConsoleConfig()
    config.security.token = "s3cret"
    return TestClient(create_app(config, registry=registry))


# =============================================================================
# GET
# =============================================================================

class TestListEndpoint:
    """Tests for GET /bundles."""

    def test_list(self, client):
        response = client.get("/bundles")
        assert response.status_code == 200
        data = response.json()
        assert data["numActions"] == 4
        assert data["startLevel"] == 1
        assert data["status"]["total"] == 5
        assert [b["id"] for b in data["data"]] == [1, 2, 3, 4, 0]
        assert "error" not in data

    def test_action_descriptors(self, client):
        first = client.get("/bundles").json()["data"][0]
        assert first["actions"][1] == {"enabled": True, "name": "Stop", "link": "stop"}
        assert first["actions"][2]["title"] == "Refresh Package Imports"

    def test_empty_runtime(self):
        client = TestClient(create_app(ConsoleConfig()))
        data = client.get("/bundles").json()
        assert data["error"] == "No Bundles installed currently"
        assert "data" not in data


class TestBundleEndpoint:
    """Tests for GET /bundles/{identifier}."""

    def test_by_id(self, client):
        data = client.get("/bundles/2").json()
        assert [b["id"] for b in data["data"]] == [2]
        assert data["status"]["total"] == 1
        props = {p["key"]: p["value"] for p in data["data"][0]["props"]}
        assert props["Imported Packages"].startswith("com.acme.api,version=1.2.0 from com.acme.core (1)")

    def test_by_name_and_version(self, client):
        data = client.get("/bundles/com.acme.web:2.1.0").json()
        assert data["data"][0]["id"] == 3

    def test_unknown_bundle_falls_back_to_list(self, client):
        data = client.get("/bundles/org.unknown").json()
        assert data["status"]["total"] == 5

    def test_json_view(self, client):
        response = client.get("/bundles/1.json")
        assert response.status_code == 200
        data = response.json()
        assert data["bundleId"] == 1
        assert data["props"][0] == {"key": "Symbolic Name", "value": "com.acme.core"}
        exports = next(p["value"] for p in data["props"] if p["key"] == "Exported Packages")
        assert "!! com.acme.util,version=1.0.0 -- Overwritten by Boot Delegation" in exports

    def test_json_view_of_unknown_bundle(self, client):
        response = client.get("/bundles/99.json")
        assert response.status_code == 200
        assert response.json() == {}


# =============================================================================
# POST
# =============================================================================

class TestActionEndpoint:
    """Tests for POST /bundles/{identifier}?action=..."""

    def test_start(self, client, registry):
        response = client.post("/bundles/com.acme.web", params={"action": "start"})
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == 2
        assert data["state"] == "Active"
        assert data["props"]

    def test_uninstall(self, client, registry):
        data = client.post("/bundles/4", params={"action": "uninstall"}).json()
        assert data == {"bundleId": 4}
        assert registry.get_module(4) is None

    def test_unknown_bundle(self, client):
        response = client.post("/bundles/99", params={"action": "start"})
        assert response.status_code == 200
        assert response.json() == {}

    def test_refresh_packages(self, client):
        assert client.post("/bundles", params={"action": "refreshPackages"}).json() == {"reload": True}
        assert client.post("/bundles/3", params={"action": "refreshPackages"}).json() == {"reload": True}

    def test_other_actions_need_a_bundle(self, client):
        assert client.post("/bundles", params={"action": "start"}).status_code == 400


# =============================================================================
# Auth
# =============================================================================

class TestAuth:
    """Tests for the bearer token check."""

    def test_missing_token(self, secured_client):
        response = secured_client.get("/bundles")
        assert response.status_code == 401
        assert response.json()["detail"] == "Missing authentication token"

    def test_wrong_token(self, secured_client):
        response = secured_client.get("/bundles", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid authentication token"

    def test_valid_token(self, secured_client):
        response = secured_client.get("/bundles", headers={"Authorization": "Bearer s3cret"})
        assert response.status_code == 200

    def test_actions_are_protected(self, secured_client, registry):
        response = secured_client.post("/bundles/2", params={"action": "start"})
        assert response.status_code == 401
        assert registry.get_module(2).state.value == "resolved"
