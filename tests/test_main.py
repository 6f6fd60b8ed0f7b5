"""
End-to-end tests for the long-lived FastAPI app (main.py).

Every response must carry the CORS header set, and all failures use the
{"success": false, "message": ...} envelope.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from exceptions import StoreUnavailable
from main import create_app

def assert_cors(response) -> None:
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["timestamp"]
        assert_cors(response)


class TestSubmitForm:
    def test_scenario_submit_then_list(self, client: TestClient, valid_form: dict):
        response = client.post("/api/submit-form", json=valid_form)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Form submitted successfully"}
        assert_cors(response)

        listed = client.get("/api/submissions")
        assert listed.status_code == 200
        submissions = listed.json()["submissions"]
        assert submissions[0]["name"] == "A"
        assert submissions[0]["email"] == "a@b.co"
        assert submissions[0]["phone"] == "555"
        assert submissions[0]["timestamp"]

    def test_scenario_bad_email(self, client: TestClient, valid_form: dict):
        response = client.post("/api/submit-form", json={**valid_form, "email": "bad-email"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid email format"}
        assert_cors(response)
        assert client.get("/api/submissions").json()["submissions"] == []

    def test_missing_field(self, client: TestClient):
        response = client.post("/api/submit-form", json={"name": "A", "email": "a@b.co"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "All fields are required"}

    def test_malformed_json(self, client: TestClient):
        response = client.post(
            "/api/submit-form",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "All fields are required"


class TestSubmissions:
    def test_empty(self, client: TestClient):
        response = client.get("/api/submissions")
        assert response.status_code == 200
        assert response.json() == {"success": True, "submissions": []}
        assert_cors(response)


class TestRouting:
    @pytest.mark.parametrize("path", ["/api/health", "/api/submissions", "/api/submit-form"])
    def test_preflight(self, client: TestClient, path: str):
        response = client.options(path)
        assert response.status_code == 200
        assert response.json() == {}
        assert response.headers["access-control-max-age"] == "86400"
        assert_cors(response)

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/submit-form"),
            ("PUT", "/api/submit-form"),
            ("DELETE", "/api/submissions"),
            ("POST", "/api/health"),
            ("GET", "/api/nowhere"),
        ],
    )
    def test_method_not_allowed(self, client: TestClient, method: str, path: str):
        response = client.request(method, path)
        assert response.status_code == 405
        assert response.json() == {"success": False, "message": "Method not allowed"}
        assert_cors(response)


class TestStoreFailures:
    @pytest.fixture
    def broken_client(self, sql_settings):
        store = MagicMock()
        store.open.side_effect = StoreUnavailable("open", "invalid_grant: bad signature")
        with TestClient(create_app(settings=sql_settings, store=store)) as test_client:
            yield test_client

    def test_app_starts_despite_store_failure(self, broken_client: TestClient):
        assert broken_client.get("/api/health").status_code == 200

    def test_submit_returns_generic_500(self, broken_client: TestClient, valid_form: dict):
        response = broken_client.post("/api/submit-form", json=valid_form)
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
        assert "invalid_grant" not in response.text
        assert_cors(response)

    def test_list_returns_generic_500(self, broken_client: TestClient):
        response = broken_client.get("/api/submissions")
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error fetching submissions"}

    def test_preflight_ignores_store_state(self, broken_client: TestClient):
        assert broken_client.options("/api/submit-form").status_code == 200


class TestLifespan:
    def test_store_prepared_at_startup(self, client: TestClient, sql_store):
        assert sql_store.first_table() == "submissions"
        assert client.app.state.store is sql_store


class TestUnexpectedStoreErrors:
    @pytest.fixture
    def misconfigured_client(self, sql_settings):
        store = MagicMock()
        store.first_table.side_effect = AttributeError("'str' object has no attribute 'keys'")
        with TestClient(create_app(settings=sql_settings, store=store)) as test_client:
            yield test_client

    def test_app_still_starts(self, misconfigured_client: TestClient):
        assert misconfigured_client.get("/api/health").status_code == 200

    def test_submit_returns_generic_500(self, misconfigured_client: TestClient, valid_form: dict):
        response = misconfigured_client.post("/api/submit-form", json=valid_form)
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
        assert_cors(response)

    def test_list_returns_generic_500(self, misconfigured_client: TestClient):
        response = misconfigured_client.get("/api/submissions")
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error fetching submissions"}


class TestResponseHeaders:
    def test_only_cors_headers_added(self, client: TestClient):
        response = client.get("/api/health")
        assert "x-frame-options" not in response.headers
        assert "x-content-type-options" not in response.headers
