"""Online presence heartbeat for a signed-in user."""

import asyncio
import logging
from typing import Any

from dormmate.core.config import get_settings
from dormmate.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


class PresenceTracker:
    """Keeps a user's ``is_online`` / ``last_seen`` fresh while a session is open.

    Marks the user online on start and every heartbeat interval after
    that, follows visibility reports, and marks the user offline on
    unload and on stop. Presence is best-effort: write failures are
    logged and otherwise ignored.

    Usage::

        async with PresenceTracker(profile_service, user_id):
            ...
    """

    def __init__(
        self,
        profile_service: ProfileService,
        user_id: str,
        heartbeat_seconds: float | None = None,
    ) -> None:
        self.profile_service = profile_service
        self.user_id = str(user_id)
        self.heartbeat_seconds = heartbeat_seconds or get_settings().presence_heartbeat_seconds
        self._heartbeat: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._heartbeat is not None and not self._heartbeat.done()

    async def start(self) -> None:
        """Mark online and start the heartbeat. Starting twice is a no-op."""
        if self.running:
            return
        await self._mark(True)
        self._heartbeat = asyncio.create_task(self._beat(), name=f"presence:{self.user_id}")

    async def stop(self) -> None:
        """Stop the heartbeat and mark the user offline."""
        task, self._heartbeat = self._heartbeat, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await self._mark(False)

    async def set_visibility(self, visible: bool) -> None:
        """Hidden tabs count as offline, visible ones as online."""
        await self._mark(visible)

    async def handle_unload(self) -> None:
        await self._mark(False)

    async def _beat(self) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_seconds)
            await self._mark(True)

    async def _mark(self, is_online: bool) -> None:
        try:
            await self.profile_service.set_presence(self.user_id, is_online)
        except Exception as e:
            logger.warning("Failed to update presence for %s (online=%s): %s", self.user_id, is_online, e)

    async def __aenter__(self) -> "PresenceTracker":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()
