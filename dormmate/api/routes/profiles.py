"""Profile and interest API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from dormmate.api.deps import CurrentUser, UserClient
from dormmate.api.middleware.error_handler import NotFoundError
from dormmate.schemas.profile import (
    InterestResponse,
    ProfileCard,
    ProfileResponse,
    ProfileSetup,
    ProfileUpdate,
)
from dormmate.services.interest_service import InterestService
from dormmate.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])
interests_router = APIRouter(prefix="/interests", tags=["profiles"])


@router.post(
    "/me",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Set up current user's profile",
    description="Creates (or overwrites) the caller's profile and adds the selected interests.",
)
async def setup_my_profile(data: ProfileSetup, user: CurrentUser, client: UserClient) -> ProfileResponse:
    """Create the authenticated user's profile on first sign-in.

    Args:
        data: Profile fields and selected interest IDs.
        user: The authenticated user context.
        client: Supabase client acting as the user.

    Returns:
        ProfileResponse: The stored profile with interests.
    """
    profile = await ProfileService(client).setup_profile(user.user_id, data)
    return ProfileResponse(**profile)


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user's profile",
    description="Returns the authenticated user's profile with interest names and IDs.",
)
async def get_my_profile(user: CurrentUser, client: UserClient) -> ProfileResponse:
    """Get the authenticated user's profile.

    Raises:
        NotFoundError: 404 if profile setup has not been completed.
    """
    profile = await ProfileService(client).get_profile_with_interests(user.user_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return ProfileResponse(**profile)


@router.patch(
    "/me",
    response_model=ProfileResponse,
    summary="Update current user's profile",
    description="Updates the provided fields. A provided interest list replaces the current one.",
)
async def update_my_profile(data: ProfileUpdate, user: CurrentUser, client: UserClient) -> ProfileResponse:
    """Update the authenticated user's profile.

    Raises:
        NotFoundError: 404 if profile not found.
    """
    profile = await ProfileService(client).update_profile(user.user_id, data)
    if not profile:
        raise NotFoundError("Profile not found")
    return ProfileResponse(**profile)


@router.get(
    "/{profile_id}",
    response_model=ProfileCard,
    summary="Get a profile",
    description="Returns another user's public profile card.",
)
async def get_profile(profile_id: UUID, user: CurrentUser, client: UserClient) -> ProfileCard:
    profile = await ProfileService(client).get_profile_with_interests(profile_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return ProfileCard.model_validate(profile)


@interests_router.get(
    "",
    response_model=list[InterestResponse],
    summary="List interests",
    description="Interest reference list ordered by category.",
)
async def list_interests(user: CurrentUser, client: UserClient) -> list[InterestResponse]:
    interests = await InterestService(client).list_interests()
    return [InterestResponse(**interest) for interest in interests]
