"""Integration tests for request-level middleware."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from postgrest.exceptions import APIError as PostgrestAPIError


class TestRequestSizeLimit:
    def test_oversized_body_rejected(self, client: TestClient, auth_headers: dict[str, str], test_settings) -> None:
        body = "x" * (test_settings.max_request_body_size + 1)

        response = client.post(
            "/api/v1/events",
            headers={**auth_headers, "Content-Type": "application/json"},
            content=body,
        )

        assert response.status_code == 413
        assert response.json()["error"] == "request_too_large"


class TestErrorFormat:
    def test_request_id_echoed(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.post(
            "/api/v1/matches",
            headers={**auth_headers, "X-Request-ID": "req-42"},
            json={"target_id": "550e8400-e29b-41d4-a716-446655440000"},
        )

        assert response.status_code == 422
        assert response.json()["request_id"] == "req-42"

    def test_storage_failure_keeps_code(
        self, client: TestClient, supabase_client: MagicMock, query_factory, auth_headers: dict[str, str]
    ) -> None:
        profiles = query_factory()
        profiles.execute.side_effect = PostgrestAPIError(
            {"code": "42501", "message": "permission denied", "hint": "check policies"}
        )
        supabase_client.tables["profiles"] = profiles

        response = client.get("/api/v1/profiles/me", headers=auth_headers)

        assert response.status_code == 502
        data = response.json()
        assert data["error"] == "storage_error"
        assert data["message"] == "permission denied"
        assert data["details"][0]["type"] == "42501"

    def test_unexpected_failure_is_internal_error(
        self, client: TestClient, supabase_client: MagicMock, query_factory, auth_headers: dict[str, str]
    ) -> None:
        profiles = query_factory()
        profiles.execute.side_effect = RuntimeError("boom")
        supabase_client.tables["profiles"] = profiles

        response = client.get("/api/v1/profiles/me", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "timestamp": response.json()["timestamp"],
        }
