"""Unit tests for PresenceTracker."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from dormmate.messaging.presence import PresenceTracker

USER_ID = "110e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def profile_service() -> MagicMock:
    service = MagicMock()
    service.set_presence = AsyncMock()
    return service


class TestPresenceTracker:
    """Tests for the presence heartbeat."""

    @pytest.mark.asyncio
    async def test_online_while_open_offline_after(self, profile_service: MagicMock) -> None:
        async with PresenceTracker(profile_service, USER_ID, heartbeat_seconds=60) as tracker:
            assert tracker.running
            profile_service.set_presence.assert_awaited_once_with(USER_ID, True)

        assert not tracker.running
        assert profile_service.set_presence.await_args_list[-1] == call(USER_ID, False)

    @pytest.mark.asyncio
    async def test_heartbeat_repeats(self, profile_service: MagicMock) -> None:
        tracker = PresenceTracker(profile_service, USER_ID, heartbeat_seconds=0.01)

        await tracker.start()
        await asyncio.sleep(0.05)
        await tracker.stop()

        online_marks = [c for c in profile_service.set_presence.await_args_list if c == call(USER_ID, True)]
        assert len(online_marks) >= 2

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self, profile_service: MagicMock) -> None:
        tracker = PresenceTracker(profile_service, USER_ID, heartbeat_seconds=60)

        await tracker.start()
        await tracker.start()

        assert profile_service.set_presence.await_count == 1
        await tracker.stop()

    @pytest.mark.asyncio
    async def test_visibility_and_unload(self, profile_service: MagicMock) -> None:
        tracker = PresenceTracker(profile_service, USER_ID, heartbeat_seconds=60)

        await tracker.set_visibility(False)
        await tracker.set_visibility(True)
        await tracker.handle_unload()

        assert profile_service.set_presence.await_args_list == [
            call(USER_ID, False),
            call(USER_ID, True),
            call(USER_ID, False),
        ]

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self, profile_service: MagicMock) -> None:
        profile_service.set_presence.side_effect = RuntimeError("offline")

        async with PresenceTracker(profile_service, USER_ID, heartbeat_seconds=60) as tracker:
            assert tracker.running
