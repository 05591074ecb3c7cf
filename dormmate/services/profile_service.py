"""Profile business logic service."""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from supabase import AsyncClient

from dormmate.schemas.profile import ProfileSetup, ProfileUpdate
from dormmate.services.interest_service import InterestService

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = "id, full_name, is_online, last_seen"


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string for timestamp columns."""
    return datetime.now(timezone.utc).isoformat()


class ProfileService:
    """Service for managing user profiles and presence."""

    def __init__(self, client: AsyncClient) -> None:
        """Initialize profile service with a Supabase client."""
        self.client = client
        self.interest_service = InterestService(client)

    async def get_profile(self, user_id: UUID | str) -> dict[str, Any] | None:
        """Get a profile by ID.

        Args:
            user_id: The profile (auth user) ID.

        Returns:
            dict | None: The profile data or None if not found.
        """
        response = (
            await self.client.table("profiles")
            .select("*")
            .eq("id", str(user_id))
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    async def get_profile_with_interests(self, user_id: UUID | str) -> dict[str, Any] | None:
        """Get a profile with interest names and IDs attached.

        Returns:
            dict | None: Profile data with ``interests`` and ``interest_ids``.
        """
        profile = await self.get_profile(user_id)
        if not profile:
            return None

        interests = await self.interest_service.get_user_interests(user_id)
        return {
            **profile,
            "interests": [interest["name"] for interest in interests],
            "interest_ids": [interest["id"] for interest in interests],
        }

    async def get_profiles(
        self, user_ids: list[str], columns: str = "*"
    ) -> dict[str, dict[str, Any]]:
        """Get several profiles keyed by ID."""
        if not user_ids:
            return {}

        response = (
            await self.client.table("profiles")
            .select(columns)
            .in_("id", sorted(set(user_ids)))
            .execute()
        )

        return {row["id"]: row for row in response.data or []}

    async def list_other_profiles(self, user_id: UUID | str) -> list[dict[str, Any]]:
        """List every profile except the caller's."""
        response = (
            await self.client.table("profiles")
            .select("*")
            .neq("id", str(user_id))
            .execute()
        )

        return response.data or []

    async def setup_profile(self, user_id: UUID | str, data: ProfileSetup) -> dict[str, Any]:
        """Create (or overwrite) the caller's profile and add their interests.

        Args:
            user_id: The auth user ID; it becomes the profile ID.
            data: Setup form data.

        Returns:
            dict: The profile with interests attached.
        """
        profile_data = data.model_dump(mode="json", exclude={"interest_ids"})
        profile_data["id"] = str(user_id)
        profile_data["updated_at"] = utc_now_iso()

        response = await self.client.table("profiles").upsert(profile_data).execute()

        await self.interest_service.add_interests(user_id, data.interest_ids)
        logger.info("Profile set up for user %s with %d interests", user_id, len(data.interest_ids))

        profile = await self.get_profile_with_interests(user_id)
        return profile or response.data[0]

    async def update_profile(
        self,
        user_id: UUID | str,
        data: ProfileUpdate,
    ) -> dict[str, Any] | None:
        """Update the caller's profile.

        Args:
            user_id: The profile ID.
            data: The fields to update; ``interest_ids`` replaces the set.

        Returns:
            dict | None: The updated profile with interests, or None if not found.
        """
        update_data = data.model_dump(mode="json", exclude_unset=True, exclude={"interest_ids"})

        if update_data:
            update_data["updated_at"] = utc_now_iso()
            response = (
                await self.client.table("profiles")
                .update(update_data)
                .eq("id", str(user_id))
                .execute()
            )
            if not response.data:
                return None

        if data.interest_ids is not None:
            await self.interest_service.replace_interests(user_id, data.interest_ids)

        return await self.get_profile_with_interests(user_id)

    async def set_presence(self, user_id: UUID | str, is_online: bool) -> None:
        """Write the online flag and stamp ``last_seen``."""
        await (
            self.client.table("profiles")
            .update({"is_online": is_online, "last_seen": utc_now_iso()})
            .eq("id", str(user_id))
            .execute()
        )
