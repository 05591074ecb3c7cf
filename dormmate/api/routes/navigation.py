"""Navigation shell API routes."""

from fastapi import APIRouter, Query

from dormmate.api.deps import OptionalUser
from dormmate.core.navigation import NAVBAR_ITEMS, AppContext, Page
from dormmate.core.supabase import create_user_client
from dormmate.schemas.navigation import NavigationResponse, NavItem
from dormmate.services.profile_service import ProfileService

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get(
    "",
    response_model=NavigationResponse,
    summary="Resolve a page",
    description="Returns the page to render for the requested one, given the caller's sign-in and profile state.",
)
async def resolve(
    user: OptionalUser,
    page: Page = Query(default=Page.HOME, description="Requested page"),
) -> NavigationResponse:
    """Resolve the page to show.

    Anonymous callers only reach public pages; signed-in callers without a
    profile are sent to profile setup.
    """
    context = AppContext(user=user)
    if user is not None:
        client = await create_user_client(user.access_token)
        context.profile = await ProfileService(client).get_profile(user.user_id)

    return NavigationResponse(
        page=context.navigate(page),
        show_navbar=context.show_navbar,
        items=[NavItem(key=key, label=label) for key, label in NAVBAR_ITEMS] if context.is_authenticated else [],
    )
