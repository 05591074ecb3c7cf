"""Integration tests for the messaging WebSocket."""

from typing import Any, Callable
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

CONVERSATION_ID = "cc0e8400-e29b-41d4-a716-446655440000"
STRANGER_CONVERSATION = {
    "id": CONVERSATION_ID,
    "user1_id": "770e8400-e29b-41d4-a716-446655440000",
    "user2_id": "880e8400-e29b-41d4-a716-446655440000",
}


def receive_until(websocket: Any, predicate: Callable[[dict], bool], limit: int = 10) -> dict:
    """Read frames until one satisfies ``predicate``."""
    for _ in range(limit):
        frame = websocket.receive_json()
        if predicate(frame):
            return frame
    raise AssertionError("expected frame not received")


class TestMessagingSocket:
    """Tests for /api/v1/messages/ws."""

    def test_missing_token_closes(self, client: TestClient) -> None:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/api/v1/messages/ws") as websocket:
                websocket.receive_json()

        assert exc_info.value.code == 1008

    def test_invalid_token_closes(self, client: TestClient) -> None:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/api/v1/messages/ws?token=not-a-jwt") as websocket:
                websocket.receive_json()

        assert exc_info.value.code == 1008

    def test_initial_state_and_presence(
        self, client: TestClient, supabase_client: MagicMock, token_factory
    ) -> None:
        with client.websocket_connect(f"/api/v1/messages/ws?token={token_factory()}") as websocket:
            frame = receive_until(websocket, lambda f: f["type"] == "state")

        assert frame["state"]["conversations"] == []
        assert frame["state"]["selected_conversation_id"] is None
        assert supabase_client.tables["profiles"].update.call_args_list[0].args[0]["is_online"] is True

    def test_search_updates_state(self, client: TestClient, token_factory) -> None:
        with client.websocket_connect(f"/api/v1/messages/ws?token={token_factory()}") as websocket:
            receive_until(websocket, lambda f: f["type"] == "state")
            websocket.send_json({"type": "search", "query": "Анна"})

            frame = receive_until(
                websocket, lambda f: f["type"] == "state" and f["state"]["search_query"] == "Анна"
            )

        assert frame["state"]["conversations"] == []

    def test_unknown_action_reports_error(self, client: TestClient, token_factory) -> None:
        with client.websocket_connect(f"/api/v1/messages/ws?token={token_factory()}") as websocket:
            websocket.send_json({"type": "dance"})

            frame = receive_until(websocket, lambda f: f["type"] == "error")

        assert frame["error"] == "invalid_action"

    def test_select_without_id_reports_error(self, client: TestClient, token_factory) -> None:
        with client.websocket_connect(f"/api/v1/messages/ws?token={token_factory()}") as websocket:
            websocket.send_json({"type": "select_conversation"})

            frame = receive_until(websocket, lambda f: f["type"] == "error")

        assert frame["error"] == "invalid_action"

    def test_foreign_conversation_is_refused(
        self, client: TestClient, supabase_client: MagicMock, query_factory, token_factory
    ) -> None:
        supabase_client.tables["conversations"] = query_factory([], STRANGER_CONVERSATION)

        with client.websocket_connect(f"/api/v1/messages/ws?token={token_factory()}") as websocket:
            receive_until(websocket, lambda f: f["type"] == "state")
            websocket.send_json({"type": "select_conversation", "conversation_id": CONVERSATION_ID})

            frame = receive_until(websocket, lambda f: f["type"] == "error")

        assert frame["error"] == "authorization_error"

    def test_connection_failure_keeps_session_alive(
        self, client: TestClient, supabase_client: MagicMock, query_factory, response_factory, token_factory
    ) -> None:
        conversations = query_factory()
        conversations.execute.side_effect = [
            response_factory([]),
            httpx.ConnectError("offline"),
            response_factory([]),
            response_factory([]),
        ]
        supabase_client.tables["conversations"] = conversations

        with client.websocket_connect(f"/api/v1/messages/ws?token={token_factory()}") as websocket:
            receive_until(websocket, lambda f: f["type"] == "state")
            websocket.send_json({"type": "select_conversation", "conversation_id": CONVERSATION_ID})
            error = receive_until(websocket, lambda f: f["type"] == "error")
            websocket.send_json({"type": "search", "query": "Борис"})
            frame = receive_until(
                websocket, lambda f: f["type"] == "state" and f["state"]["search_query"] == "Борис"
            )

        assert error["error"] == "storage_error"
        assert frame["state"]["selected_conversation_id"] is None

    def test_send_without_selection_reports_nothing(self, client: TestClient, token_factory) -> None:
        with client.websocket_connect(f"/api/v1/messages/ws?token={token_factory()}") as websocket:
            receive_until(websocket, lambda f: f["type"] == "state")
            websocket.send_json({"type": "draft", "text": "Привет"})
            websocket.send_json({"type": "send"})
            websocket.send_json({"type": "search", "query": "Вера"})

            seen = []
            for _ in range(10):
                frame = websocket.receive_json()
                seen.append(frame)
                if frame["type"] == "state" and frame["state"]["search_query"] == "Вера":
                    break

        assert [f for f in seen if f["type"] == "error"] == []
        assert seen[-1]["state"]["draft"] == "Привет"
