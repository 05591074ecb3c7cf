"""Interest reference data and per-user interest sets."""

from typing import Any, Iterable
from uuid import UUID

from supabase import AsyncClient


class InterestService:
    """Service for interests and the user_interests join table."""

    def __init__(self, client: AsyncClient) -> None:
        """Initialize interest service with a Supabase client."""
        self.client = client

    async def list_interests(self) -> list[dict[str, Any]]:
        """List all interests ordered by category.

        Returns:
            list[dict]: Interest rows.
        """
        response = (
            await self.client.table("interests")
            .select("*")
            .order("category", desc=False)
            .execute()
        )

        return response.data or []

    async def get_user_interests(self, user_id: UUID | str) -> list[dict[str, Any]]:
        """Get the interests selected by one user.

        Args:
            user_id: The profile ID.

        Returns:
            list[dict]: ``{"id", "name"}`` pairs.
        """
        response = (
            await self.client.table("user_interests")
            .select("interest_id, interests(id, name)")
            .eq("user_id", str(user_id))
            .execute()
        )

        return [row["interests"] for row in response.data or [] if row.get("interests")]

    async def get_names_by_user(self, user_ids: Iterable[UUID | str]) -> dict[str, list[str]]:
        """Get interest names for many users with a single query.

        Args:
            user_ids: Profile IDs to resolve.

        Returns:
            dict: Profile ID to interest names. Users without interests map to [].
        """
        ids = sorted({str(user_id) for user_id in user_ids})
        names: dict[str, list[str]] = {user_id: [] for user_id in ids}
        if not ids:
            return names

        response = (
            await self.client.table("user_interests")
            .select("user_id, interests(name)")
            .in_("user_id", ids)
            .execute()
        )

        for row in response.data or []:
            interest = row.get("interests")
            if interest:
                names.setdefault(row["user_id"], []).append(interest["name"])

        return names

    async def add_interests(self, user_id: UUID | str, interest_ids: Iterable[UUID | str]) -> None:
        """Add interests to a user's set, ignoring ones already present."""
        rows = self._rows(user_id, interest_ids)
        if not rows:
            return

        await (
            self.client.table("user_interests")
            .upsert(rows, on_conflict="user_id,interest_id", ignore_duplicates=True)
            .execute()
        )

    async def replace_interests(self, user_id: UUID | str, interest_ids: Iterable[UUID | str]) -> None:
        """Replace a user's interest set with the given one."""
        rows = self._rows(user_id, interest_ids)

        await self.client.table("user_interests").delete().eq("user_id", str(user_id)).execute()

        if rows:
            await self.client.table("user_interests").insert(rows).execute()

    @staticmethod
    def _rows(user_id: UUID | str, interest_ids: Iterable[UUID | str]) -> list[dict[str, str]]:
        # Set semantics: each interest at most once, order irrelevant
        unique_ids = dict.fromkeys(str(interest_id) for interest_id in interest_ids)
        return [{"user_id": str(user_id), "interest_id": interest_id} for interest_id in unique_ids]
