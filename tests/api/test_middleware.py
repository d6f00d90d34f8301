"""Tests for API middleware."""

from fastapi.testclient import TestClient

from app.infrastructure.config import Settings
from app.main import create_app


class TestRequestIdMiddleware:
    """Tests for request ID correlation middleware."""

    def test_generates_request_id_if_not_provided(self, client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = client.get("/health")
        assert response.status_code == 200
        assert "X-Request-ID" in response.headers
        # UUID format
        request_id = response.headers["X-Request-ID"]
        assert len(request_id) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        """Should use request ID from request headers."""
        custom_id = "custom-request-id-12345"
        response = client.get(
            "/health",
            headers={"X-Request-ID": custom_id},
        )
        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == custom_id

    def test_request_id_in_error_body(self, client: TestClient) -> None:
        """Error envelopes echo the request ID."""
        response = client.get(
            "/products/999",
            headers={"X-Request-ID": "trace-404"},
        )
        assert response.status_code == 404
        assert response.json()["request_id"] == "trace-404"

    def test_unhandled_error_envelope(self, app_settings: Settings) -> None:
        """Unhandled errors render the 500 envelope with the request ID."""
        app = create_app(app_settings)

        async def explode() -> None:
            raise RuntimeError("boom")

        app.add_api_route("/explode", explode)

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/explode", headers={"X-Request-ID": "trace-500"})

        assert response.status_code == 500
        data = response.json()
        assert data["error_code"] == "INTERNAL_ERROR"
        assert data["request_id"] == "trace-500"
