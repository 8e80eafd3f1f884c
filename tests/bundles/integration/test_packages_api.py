"""Integration tests for the /packages endpoints."""

import httpx
import pytest
from bundles.api import package_router
from bundles.package.package import Package
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.utils.globals import current_domain

ADMIN = {"Authorization": "Bearer admin-token"}
USER = {"Authorization": "Bearer user-token"}


@pytest.fixture()
def client(auth_gateway):
    app = FastAPI()
    app.include_router(package_router)
    return TestClient(app)


def _stored_skus(name):
    package = current_domain.repository_for(Package).find_by_name(name)
    return package.skus if package else None


class TestListPackages:
    def test_empty(self, client):
        response = client.get("/packages")
        assert response.status_code == 200
        assert response.json() == {"packages": [], "is_admin": False}

    def test_public_listing(self, client):
        client.put("/packages", json={"name": "silver", "skus": ["A", "B"]}, headers=ADMIN)
        client.put("/packages", json={"name": "gold", "skus": ["C"]}, headers=ADMIN)

        data = client.get("/packages").json()
        assert [p["name"] for p in data["packages"]] == ["gold", "silver"]
        assert data["packages"][1]["skus"] == ["A", "B"]
        assert data["packages"][1]["updated_at"] is not None

    def test_is_admin_flag(self, client):
        assert client.get("/packages", headers=ADMIN).json()["is_admin"] is True
        assert client.get("/packages", headers=USER).json()["is_admin"] is False

    def test_invalid_token_still_lists(self, client):
        response = client.get("/packages", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 200
        assert response.json()["is_admin"] is False

    def test_backend_down_still_lists(self, client, auth_gateway):
        auth_gateway.configure(available=False)
        response = client.get("/packages", headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["is_admin"] is False


class TestReplacePackage:
    def test_replace(self, client):
        response = client.put("/packages", json={"name": "silver", "skus": ["A", "B"]}, headers=ADMIN)
        assert response.status_code == 200
        package = response.json()["package"]
        assert package["name"] == "silver"
        assert package["skus"] == ["A", "B"]
        assert _stored_skus("silver") == ["A", "B"]

    def test_replace_is_idempotent(self, client):
        body = {"name": "gold", "skus": ["A", "B"]}
        first = client.put("/packages", json=body, headers=ADMIN).json()["package"]
        second = client.put("/packages", json=body, headers=ADMIN).json()["package"]
        assert first["skus"] == second["skus"] == ["A", "B"]

    def test_name_is_normalized(self, client):
        response = client.put("/packages", json={"name": " Platinum ", "skus": []}, headers=ADMIN)
        assert response.json()["package"]["name"] == "platinum"

    def test_anonymous_is_unauthorized_and_nothing_changes(self, client):
        client.put("/packages", json={"name": "silver", "skus": ["A"]}, headers=ADMIN)

        response = client.put("/packages", json={"name": "silver", "skus": ["Z"]})
        assert response.status_code == 401
        assert response.json() == {"error": "unauthorized"}
        assert _stored_skus("silver") == ["A"]

    def test_non_admin_is_forbidden(self, client):
        response = client.put("/packages", json={"name": "silver", "skus": ["Z"]}, headers=USER)
        assert response.status_code == 403
        assert response.json() == {"error": "forbidden"}
        assert _stored_skus("silver") is None

    def test_credential_checked_before_body(self, client):
        response = client.put("/packages", content=b"not json")
        assert response.status_code == 401

    @pytest.mark.parametrize(
        "body",
        [
            {"name": "silver"},
            {"skus": ["A"]},
            {"name": "", "skus": []},
            {"name": "diamond", "skus": []},
            {"name": "silver", "skus": "A"},
            {"name": "silver", "skus": [1, 2]},
        ],
    )
    def test_invalid_payload(self, client, body):
        response = client.put("/packages", json=body, headers=ADMIN)
        assert response.status_code == 400
        assert response.json() == {"error": "invalid payload"}

    def test_non_object_body(self, client):
        response = client.put("/packages", json=["silver"], headers=ADMIN)
        assert response.status_code == 400

    def test_malformed_json(self, client):
        response = client.put(
            "/packages",
            content=b"{broken",
            headers={**ADMIN, "Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestMergePackage:
    def test_merge(self, client):
        client.put("/packages", json={"name": "silver", "skus": ["A", "B"]}, headers=ADMIN)

        response = client.patch(
            "/packages",
            json={"name": "silver", "addSkus": ["B", "C"], "removeSkus": ["A"]},
            headers=ADMIN,
        )
        assert response.status_code == 200
        assert response.json()["package"]["skus"] == ["B", "C"]
        assert _stored_skus("silver") == ["B", "C"]

    def test_snake_case_keys_accepted(self, client):
        client.put("/packages", json={"name": "gold", "skus": ["A"]}, headers=ADMIN)
        response = client.patch("/packages", json={"name": "gold", "add_skus": ["B"]}, headers=ADMIN)
        assert response.json()["package"]["skus"] == ["A", "B"]

    def test_missing_package(self, client):
        response = client.patch("/packages", json={"name": "platinum", "addSkus": ["A"]}, headers=ADMIN)
        assert response.status_code == 404
        assert response.json() == {"error": "package not found"}
        assert _stored_skus("platinum") is None

    def test_missing_name(self, client):
        response = client.patch("/packages", json={"addSkus": ["A"]}, headers=ADMIN)
        assert response.status_code == 400
        assert response.json() == {"error": "name required"}

    def test_invalid_lists(self, client):
        response = client.patch("/packages", json={"name": "silver", "addSkus": "A"}, headers=ADMIN)
        assert response.status_code == 400
        assert response.json() == {"error": "invalid payload"}

    def test_anonymous(self, client):
        response = client.patch("/packages", json={"name": "silver", "addSkus": ["A"]})
        assert response.status_code == 401

    def test_non_admin(self, client):
        response = client.patch("/packages", json={"name": "silver", "addSkus": ["A"]}, headers=USER)
        assert response.status_code == 403


class TestStorageFailure:
    def test_write_failure_is_upstream_failure(self, client, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(Package, "replace_skus", explode)
        response = client.put("/packages", json={"name": "silver", "skus": ["A"]}, headers=ADMIN)
        assert response.status_code == 500
        assert response.json() == {"error": "upstream failure"}


class TestMisbehavingAuthBackend:
    @pytest.fixture()
    def maintenance_client(self):
        from bundles.access import reset_gateway, set_gateway
        from bundles.access.http_adapter import HttpAuthGateway

        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
        set_gateway(HttpAuthGateway("https://backend.test", api_key="anon-key", transport=transport))

        app = FastAPI()
        app.include_router(package_router)
        yield TestClient(app)

        reset_gateway()

    def test_listing_still_answers(self, maintenance_client):
        response = maintenance_client.get("/packages", headers={"Authorization": "Bearer x"})
        assert response.status_code == 200
        assert response.json()["is_admin"] is False

    def test_write_is_unauthorized(self, maintenance_client):
        response = maintenance_client.put(
            "/packages",
            json={"name": "silver", "skus": ["A"]},
            headers={"Authorization": "Bearer x"},
        )
        assert response.status_code == 401
