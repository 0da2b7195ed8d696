"""
Tests for app-level behaviour: CORS headers, preflight, 405 and the
outer error boundary.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from agri_backend.auth.dependencies import AuthenticatedUser, get_authenticated_user
from agri_backend.main import app

client = TestClient(app)


async def mock_get_authenticated_user_dependency():
    """Mock dependency that returns test AuthenticatedUser."""
    return AuthenticatedUser(user_id="test-user-id", access_token="test-access-token")


@pytest.fixture
def mock_auth():
    app.dependency_overrides[get_authenticated_user] = mock_get_authenticated_user_dependency
    yield
    app.dependency_overrides.clear()


class TestCors:
    def test_options_preflight_is_empty_success_without_auth(self):
        response = client.options("/farm-finance")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"

    def test_browser_preflight_is_answered(self):
        response = client.options(
            "/farm-finance",
            headers={
                "Origin": "https://farm.example.com",
                "Access-Control-Request-Method": "PUT",
                "Access-Control-Request-Headers": "authorization, content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "PUT" in response.headers["access-control-allow-methods"]
        assert response.content == b""

    def test_preflight_accepts_any_requested_header(self):
        response = client.options(
            "/farm-finance",
            headers={
                "Origin": "https://farm.example.com",
                "Access-Control-Request-Method": "PUT",
                "Access-Control-Request-Headers": "authorization, x-requested-with",
            },
        )

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-headers"] == "authorization, x-requested-with"

    @pytest.mark.parametrize("path", ["/health", "/does-not-exist"])
    def test_options_on_any_path_is_empty_success(self, path):
        response = client.options(path)

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"

    def test_error_responses_carry_cors_headers(self):
        response = client.get("/farm-finance")

        assert response.status_code == 401
        assert response.headers["access-control-allow-origin"] == "*"
        assert "authorization" in response.headers["access-control-allow-headers"]
        assert response.headers["content-type"] == "application/json"


class TestMethodNotAllowed:
    @pytest.mark.parametrize("method", ["post", "patch"])
    def test_unsupported_method_returns_405(self, method):
        response = getattr(client, method)("/farm-finance", json={})

        assert response.status_code == 405
        assert response.json()["detail"] == {
            "error": "method_not_allowed",
            "details": "Method Not Allowed",
        }
        assert response.headers["access-control-allow-origin"] == "*"


class TestErrorBoundary:
    def test_unhandled_exception_becomes_generic_500(self, mock_auth):
        with patch(
            "agri_backend.routes.farm_finance.get_supabase_client",
            side_effect=RuntimeError("SUPABASE_URL=http://secret-host"),
        ):
            response = client.get("/farm-finance")

        assert response.status_code == 500
        assert response.json() == {
            "detail": {"error": "internal_error", "details": "Internal server error"}
        }
        assert "secret-host" not in response.text
        assert response.headers["access-control-allow-origin"] == "*"

    def test_malformed_json_returns_validation_error(self, mock_auth):
        response = client.put(
            "/farm-finance",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "validation_error"


def test_health_is_public():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "farm-finance-backend"}
