"""Event board business logic service."""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from postgrest import CountMethod
from supabase import AsyncClient

from dormmate.api.middleware.error_handler import NotFoundError, ValidationError
from dormmate.schemas.event import EventCreate, EventResponse

logger = logging.getLogger(__name__)


class EventService:
    """Service for events and their participants."""

    def __init__(self, client: AsyncClient) -> None:
        """Initialize event service with a Supabase client."""
        self.client = client

    async def list_upcoming(
        self, user_id: UUID | str, now: datetime | None = None
    ) -> list[EventResponse]:
        """List events that have not started yet, soonest first.

        Args:
            user_id: The caller's profile ID, used for the participation flag.
            now: Reference time, defaults to the current UTC time.

        Returns:
            list[EventResponse]: Events with creator name and participation details.
        """
        now = now or datetime.now(timezone.utc)
        response = (
            await self.client.table("events")
            .select("*, profiles!events_creator_id_fkey(full_name)")
            .gte("event_date", now.isoformat())
            .order("event_date", desc=False)
            .execute()
        )
        events = response.data or []
        if not events:
            return []

        participants = (
            await self.client.table("event_participants")
            .select("event_id, user_id")
            .in_("event_id", [event["id"] for event in events])
            .execute()
        )
        rows = participants.data or []
        counts = Counter(row["event_id"] for row in rows)
        joined = {row["event_id"] for row in rows if row["user_id"] == str(user_id)}

        result = []
        for event in events:
            count = counts.get(event["id"], 0)
            cap = event.get("max_participants")
            creator = event.get("profiles") or {}
            result.append(
                EventResponse(
                    id=event["id"],
                    creator_id=event["creator_id"],
                    creator_name=creator.get("full_name"),
                    title=event["title"],
                    description=event.get("description"),
                    category=event["category"],
                    location=event.get("location"),
                    event_date=event["event_date"],
                    max_participants=cap,
                    participant_count=count,
                    is_participant=event["id"] in joined,
                    is_full=bool(cap) and count >= cap,
                )
            )

        return result

    async def create_event(self, user_id: UUID | str, data: EventCreate) -> dict[str, Any]:
        """Create an event owned by the caller."""
        event_data = data.model_dump(mode="json")
        event_data["creator_id"] = str(user_id)

        response = await self.client.table("events").insert(event_data).execute()

        logger.info("Event created by %s: %s", user_id, data.title)
        return response.data[0]

    async def get_event(self, event_id: UUID | str) -> dict[str, Any] | None:
        """Get an event by ID."""
        response = (
            await self.client.table("events")
            .select("*")
            .eq("id", str(event_id))
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    async def count_participants(self, event_id: UUID | str) -> int:
        """Count participants of an event without fetching rows."""
        response = (
            await self.client.table("event_participants")
            .select("*", count=CountMethod.exact, head=True)
            .eq("event_id", str(event_id))
            .execute()
        )

        return response.count or 0

    async def is_participant(self, event_id: UUID | str, user_id: UUID | str) -> bool:
        """Whether a user has joined an event."""
        response = (
            await self.client.table("event_participants")
            .select("id")
            .eq("event_id", str(event_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )

        return bool(response.data)

    async def join_event(self, user_id: UUID | str, event_id: UUID | str) -> None:
        """Join an event. Joining twice is a no-op.

        Raises:
            NotFoundError: If the event does not exist.
            ValidationError: If the participant cap is reached.
        """
        event = await self.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")

        if await self.is_participant(event_id, user_id):
            return

        cap = event.get("max_participants")
        if cap and await self.count_participants(event_id) >= cap:
            raise ValidationError("Event is full")

        await (
            self.client.table("event_participants")
            .insert({"event_id": str(event_id), "user_id": str(user_id)})
            .execute()
        )
        logger.info("User %s joined event %s", user_id, event_id)

    async def leave_event(self, user_id: UUID | str, event_id: UUID | str) -> None:
        """Leave an event. Leaving an event not joined is a no-op."""
        await (
            self.client.table("event_participants")
            .delete()
            .eq("event_id", str(event_id))
            .eq("user_id", str(user_id))
            .execute()
        )
