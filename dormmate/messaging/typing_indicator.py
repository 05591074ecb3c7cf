"""Typing indicator for one open conversation."""

import asyncio
import logging
import time
from typing import Any, Callable

from dormmate.core.config import get_settings
from dormmate.core.realtime import ChangeEvent, ChangeType, RealtimeGateway
from dormmate.services.typing_service import TypingService

logger = logging.getLogger(__name__)


class TypingIndicator:
    """Publishes the caller's typing state and tracks the counterpart's.

    Outbound writes are throttled: a call that arrives within the throttle
    window of the previous write is dropped. Stopping is never throttled.
    Inbound, any change to another user's typing row sets the flag and
    (re)arms a local expiry, and a deleted row clears it at once, so a
    missed delete clears the flag on its own after the expiry.
    """

    def __init__(
        self,
        typing_service: TypingService,
        realtime: RealtimeGateway,
        conversation_id: str,
        user_id: str,
        *,
        throttle_seconds: float | None = None,
        expiry_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_change: Callable[[bool], None] | None = None,
    ) -> None:
        settings = get_settings()
        self.typing_service = typing_service
        self.realtime = realtime
        self.conversation_id = str(conversation_id)
        self.user_id = str(user_id)
        self.throttle_seconds = throttle_seconds if throttle_seconds is not None else settings.typing_throttle_seconds
        self.expiry_seconds = expiry_seconds if expiry_seconds is not None else settings.typing_expiry_seconds
        self.clock = clock
        self.on_change = on_change

        self._is_other_user_typing = False
        self._last_write: float | None = None
        self._expiry: asyncio.TimerHandle | None = None
        self._listener: asyncio.Task[None] | None = None

    @property
    def is_other_user_typing(self) -> bool:
        return self._is_other_user_typing

    async def set_typing(self, is_typing: bool) -> None:
        """Announce or withdraw the caller's typing state."""
        now = self.clock()
        if is_typing and self._last_write is not None and now - self._last_write < self.throttle_seconds:
            return
        self._last_write = now

        try:
            if is_typing:
                await self.typing_service.mark_typing(self.conversation_id, self.user_id)
            else:
                await self.typing_service.clear_typing(self.conversation_id, self.user_id)
        except Exception as e:
            logger.warning("Failed to update typing state in %s: %s", self.conversation_id, e)

    def handle_event(self, event: ChangeEvent) -> None:
        """Fold one change of the conversation's typing rows into the flag."""
        typing_user = event.new.get("user_id")
        if typing_user and typing_user != self.user_id:
            self._set_other_typing(True)
            self._arm_expiry()

        if event.type is ChangeType.DELETE:
            stopped_user = event.old.get("user_id")
            if stopped_user and stopped_user != self.user_id:
                self._cancel_expiry()
                self._set_other_typing(False)

    def start(self) -> None:
        """Start listening for the counterpart's typing rows."""
        if self._listener is None:
            self._listener = asyncio.create_task(self._listen(), name=f"typing:{self.conversation_id}")

    async def close(self) -> None:
        """Stop listening and forget the counterpart's state."""
        self._cancel_expiry()
        task, self._listener = self._listener, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._is_other_user_typing = False

    async def _listen(self) -> None:
        subscription = self.realtime.subscribe(
            f"typing:{self.conversation_id}",
            "typing_indicators",
            filter=f"conversation_id=eq.{self.conversation_id}",
        )
        try:
            async with subscription as events:
                async for event in events:
                    self.handle_event(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Typing subscription for %s failed: %s", self.conversation_id, e)

    def _arm_expiry(self) -> None:
        self._cancel_expiry()
        loop = asyncio.get_running_loop()
        self._expiry = loop.call_later(self.expiry_seconds, self._expire)

    def _cancel_expiry(self) -> None:
        if self._expiry is not None:
            self._expiry.cancel()
            self._expiry = None

    def _expire(self) -> None:
        self._expiry = None
        self._set_other_typing(False)

    def _set_other_typing(self, value: bool) -> None:
        if value == self._is_other_user_typing:
            return
        self._is_other_user_typing = value
        if self.on_change is not None:
            self.on_change(value)

    async def __aenter__(self) -> "TypingIndicator":
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
