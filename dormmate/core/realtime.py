"""Realtime change-feed subscriptions exposed as async event streams.

Supabase delivers postgres change notifications through callbacks bound to
a channel. This module turns a channel into an async context manager that
yields typed :class:`ChangeEvent` objects, so consumers fold events into
their own state with a plain ``async for`` loop and the channel is always
released when the loop exits.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from supabase import AsyncClient

logger = logging.getLogger(__name__)


class ChangeType(str, Enum):
    """Postgres change event types."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """A single row change pushed by the realtime server."""

    type: ChangeType
    table: str
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ChangeEvent":
        """Parse a postgres_changes payload.

        Accepts both the wire shape (``data.type`` / ``record`` /
        ``old_record``) and the flattened shape used by the JS client
        (``eventType`` / ``new`` / ``old``).
        """
        data = payload.get("data", payload)
        event_type = data.get("type") or data.get("eventType")
        new = data.get("record") or data.get("new") or {}
        old = data.get("old_record") or data.get("old") or {}
        return cls(
            type=ChangeType(str(event_type).upper()),
            table=data.get("table", ""),
            new=dict(new),
            old=dict(old),
        )


class RealtimeSubscription:
    """A channel subscription that yields :class:`ChangeEvent` objects.

    Usage::

        async with realtime.subscribe("messages:42", "messages",
                                      events=("INSERT",),
                                      filter="conversation_id=eq.42") as events:
            async for event in events:
                ...
    """

    def __init__(
        self,
        client: AsyncClient,
        channel_name: str,
        table: str,
        events: Iterable[str] = ("*",),
        filter: str | None = None,
    ) -> None:
        self.client = client
        self.channel_name = channel_name
        self.table = table
        self.events = tuple(events)
        self.filter = filter
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
        self._channel: Any = None

    def _on_change(self, payload: dict[str, Any]) -> None:
        try:
            event = ChangeEvent.from_payload(payload)
        except (ValueError, AttributeError) as e:
            logger.warning("Ignoring malformed change payload on %s: %s", self.channel_name, e)
            return
        self._queue.put_nowait(event)

    def _on_status(self, status: Any, error: Exception | None = None) -> None:
        logger.info("Realtime channel %s status: %s", self.channel_name, status)
        if error:
            logger.error("Realtime channel %s error: %s", self.channel_name, error)

    async def __aenter__(self) -> "RealtimeSubscription":
        channel = self.client.channel(self.channel_name)
        for event in self.events:
            kwargs: dict[str, Any] = {"table": self.table, "schema": "public"}
            if self.filter:
                kwargs["filter"] = self.filter
            channel.on_postgres_changes(event, self._on_change, **kwargs)
        self._channel = channel
        try:
            await channel.subscribe(self._on_status)
        except BaseException:
            await self._release()
            raise
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self._release()

    async def _release(self) -> None:
        if self._channel is None:
            return
        channel, self._channel = self._channel, None
        try:
            await self.client.remove_channel(channel)
        except Exception as e:
            logger.warning("Failed to release realtime channel %s: %s", self.channel_name, e)

    def __aiter__(self) -> "RealtimeSubscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        return await self._queue.get()


class RealtimeGateway:
    """Creates change-feed subscriptions on a Supabase client."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    def subscribe(
        self,
        channel_name: str,
        table: str,
        *,
        events: Iterable[str] = ("*",),
        filter: str | None = None,
    ) -> RealtimeSubscription:
        """Describe a subscription; it is opened by ``async with``."""
        return RealtimeSubscription(self.client, channel_name, table, events, filter)
