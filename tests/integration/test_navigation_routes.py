"""Integration tests for the navigation endpoint."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

PROFILE = {"id": "550e8400-e29b-41d4-a716-446655440000", "full_name": "Анна"}


class TestNavigation:
    """Tests for GET /api/v1/navigation."""

    def test_anonymous_sent_home(self, client: TestClient) -> None:
        response = client.get("/api/v1/navigation", params={"page": "messages"})

        assert response.status_code == 200
        assert response.json() == {"page": "home", "show_navbar": True, "items": []}

    def test_anonymous_landing_hides_navbar(self, client: TestClient) -> None:
        data = client.get("/api/v1/navigation").json()

        assert data["page"] == "home"
        assert data["show_navbar"] is False

    def test_anonymous_may_open_login(self, client: TestClient) -> None:
        assert client.get("/api/v1/navigation", params={"page": "login"}).json()["page"] == "login"

    def test_missing_profile_held_on_setup(
        self, client: TestClient, supabase_client: MagicMock, query_factory, auth_headers: dict[str, str]
    ) -> None:
        supabase_client.tables["profiles"] = query_factory(None)

        data = client.get("/api/v1/navigation", params={"page": "search"}, headers=auth_headers).json()

        assert data["page"] == "setup-profile"

    def test_signed_in_with_profile(
        self, client: TestClient, supabase_client: MagicMock, query_factory, auth_headers: dict[str, str]
    ) -> None:
        supabase_client.tables["profiles"] = query_factory(PROFILE)

        data = client.get("/api/v1/navigation", params={"page": "events"}, headers=auth_headers).json()

        assert data["page"] == "events"
        assert data["show_navbar"] is True
        assert [item["key"] for item in data["items"]] == ["search", "matches", "messages", "events", "profile"]

    def test_unknown_page_rejected(self, client: TestClient) -> None:
        assert client.get("/api/v1/navigation", params={"page": "admin"}).status_code == 422

    def test_missing_profile_held_on_setup_from_home(
        self, client: TestClient, supabase_client: MagicMock, query_factory, auth_headers: dict[str, str]
    ) -> None:
        supabase_client.tables["profiles"] = query_factory(None)

        data = client.get("/api/v1/navigation", headers=auth_headers).json()

        assert data["page"] == "setup-profile"
        assert data["show_navbar"] is True
        assert len(data["items"]) == 5
