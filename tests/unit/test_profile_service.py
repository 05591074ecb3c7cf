"""Unit tests for ProfileService and InterestService."""

from unittest.mock import MagicMock

import pytest

from dormmate.schemas.profile import ProfileSetup, ProfileUpdate
from dormmate.services.interest_service import InterestService
from dormmate.services.profile_service import ProfileService

USER_ID = "550e8400-e29b-41d4-a716-446655440000"
FOOTBALL = "11111111-1111-1111-1111-111111111111"
CHESS = "22222222-2222-2222-2222-222222222222"

PROFILE = {"id": USER_ID, "full_name": "Анна", "university": "НГУ (Новосибирский гос. университет)"}


class TestGetProfile:
    """Tests for get_profile and get_profile_with_interests."""

    @pytest.mark.asyncio
    async def test_missing_profile_is_none(self, supabase_client: MagicMock, query_factory) -> None:
        supabase_client.tables["profiles"] = query_factory(None)

        assert await ProfileService(supabase_client).get_profile(USER_ID) is None

    @pytest.mark.asyncio
    async def test_attaches_interest_names_and_ids(self, supabase_client: MagicMock, query_factory) -> None:
        supabase_client.tables["profiles"] = query_factory(PROFILE)
        supabase_client.tables["user_interests"] = query_factory(
            [
                {"interest_id": FOOTBALL, "interests": {"id": FOOTBALL, "name": "Футбол"}},
                {"interest_id": CHESS, "interests": {"id": CHESS, "name": "Шахматы"}},
            ]
        )

        profile = await ProfileService(supabase_client).get_profile_with_interests(USER_ID)

        assert profile["interests"] == ["Футбол", "Шахматы"]
        assert profile["interest_ids"] == [FOOTBALL, CHESS]


class TestSetupProfile:
    """Tests for setup_profile."""

    @pytest.mark.asyncio
    async def test_upserts_profile_and_interests(self, supabase_client: MagicMock, query_factory) -> None:
        profiles = query_factory([PROFILE], PROFILE)
        interests = query_factory(None, [{"interest_id": FOOTBALL, "interests": {"id": FOOTBALL, "name": "Футбол"}}])
        supabase_client.tables["profiles"] = profiles
        supabase_client.tables["user_interests"] = interests

        data = ProfileSetup(full_name="Анна", interest_ids=[FOOTBALL, FOOTBALL])
        result = await ProfileService(supabase_client).setup_profile(USER_ID, data)

        written = profiles.upsert.call_args.args[0]
        assert written["id"] == USER_ID
        assert written["full_name"] == "Анна"
        assert "updated_at" in written
        assert "interest_ids" not in written

        interests.upsert.assert_called_once_with(
            [{"user_id": USER_ID, "interest_id": FOOTBALL}],
            on_conflict="user_id,interest_id",
            ignore_duplicates=True,
        )
        assert result["interests"] == ["Футбол"]


class TestUpdateProfile:
    """Tests for update_profile."""

    @pytest.mark.asyncio
    async def test_updates_set_fields_and_replaces_interests(
        self, supabase_client: MagicMock, query_factory
    ) -> None:
        profiles = query_factory([PROFILE], PROFILE)
        interests = query_factory(None, None, [])
        supabase_client.tables["profiles"] = profiles
        supabase_client.tables["user_interests"] = interests

        data = ProfileUpdate(bio="Люблю шахматы", interest_ids=[CHESS])
        await ProfileService(supabase_client).update_profile(USER_ID, data)

        written = profiles.update.call_args.args[0]
        assert written["bio"] == "Люблю шахматы"
        assert "updated_at" in written
        assert "full_name" not in written

        interests.delete.assert_called_once()
        interests.insert.assert_called_once_with([{"user_id": USER_ID, "interest_id": CHESS}])

    @pytest.mark.asyncio
    async def test_unknown_profile_returns_none(self, supabase_client: MagicMock, query_factory) -> None:
        supabase_client.tables["profiles"] = query_factory([])

        result = await ProfileService(supabase_client).update_profile(USER_ID, ProfileUpdate(bio="x"))

        assert result is None

    @pytest.mark.asyncio
    async def test_interests_untouched_when_not_given(self, supabase_client: MagicMock, query_factory) -> None:
        supabase_client.tables["profiles"] = query_factory([PROFILE], PROFILE)
        interests = query_factory([])
        supabase_client.tables["user_interests"] = interests

        await ProfileService(supabase_client).update_profile(USER_ID, ProfileUpdate(bio="x"))

        interests.delete.assert_not_called()


class TestSetPresence:
    """Tests for set_presence."""

    @pytest.mark.asyncio
    async def test_writes_flag_and_last_seen(self, supabase_client: MagicMock, query_factory) -> None:
        profiles = query_factory(None)
        supabase_client.tables["profiles"] = profiles

        await ProfileService(supabase_client).set_presence(USER_ID, False)

        written = profiles.update.call_args.args[0]
        assert written["is_online"] is False
        assert "last_seen" in written
        profiles.eq.assert_called_with("id", USER_ID)


class TestInterestService:
    """Tests for InterestService."""

    @pytest.mark.asyncio
    async def test_names_resolved_in_one_query(self, supabase_client: MagicMock, query_factory) -> None:
        other = "660e8400-e29b-41d4-a716-446655440000"
        rows = query_factory(
            [
                {"user_id": USER_ID, "interests": {"name": "Футбол"}},
                {"user_id": USER_ID, "interests": {"name": "Шахматы"}},
            ]
        )
        supabase_client.tables["user_interests"] = rows

        names = await InterestService(supabase_client).get_names_by_user([USER_ID, other, USER_ID])

        assert names == {USER_ID: ["Футбол", "Шахматы"], other: []}
        rows.in_.assert_called_once_with("user_id", sorted([USER_ID, other]))
        rows.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_users_no_query(self, supabase_client: MagicMock) -> None:
        assert await InterestService(supabase_client).get_names_by_user([]) == {}
        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_replace_with_empty_set_only_deletes(self, supabase_client: MagicMock, query_factory) -> None:
        rows = query_factory(None)
        supabase_client.tables["user_interests"] = rows

        await InterestService(supabase_client).replace_interests(USER_ID, [])

        rows.delete.assert_called_once()
        rows.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_ordered_by_category(self, supabase_client: MagicMock, query_factory) -> None:
        rows = query_factory([{"id": FOOTBALL, "name": "Футбол", "category": "sport"}])
        supabase_client.tables["interests"] = rows

        result = await InterestService(supabase_client).list_interests()

        assert result[0]["name"] == "Футбол"
        rows.order.assert_called_once_with("category", desc=False)
