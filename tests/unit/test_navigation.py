"""Unit tests for page resolution and the application context."""

from uuid import UUID

import pytest

from dormmate.core.navigation import PUBLIC_PAGES, AppContext, Page, resolve_page, show_navbar
from dormmate.schemas.auth import UserContext


def make_user() -> UserContext:
    return UserContext(user_id=UUID("550e8400-e29b-41d4-a716-446655440000"), access_token="token")


class TestResolvePage:
    """Tests for resolve_page."""

    @pytest.mark.parametrize("page", list(Page))
    def test_anonymous_users_only_reach_public_pages(self, page: Page) -> None:
        expected = page if page in PUBLIC_PAGES else Page.HOME
        assert resolve_page(page, authenticated=False, has_profile=False) == expected

    @pytest.mark.parametrize("page", list(Page))
    def test_users_without_profile_are_held_on_setup(self, page: Page) -> None:
        assert resolve_page(page, authenticated=True, has_profile=False) == Page.SETUP_PROFILE

    @pytest.mark.parametrize("page", list(Page))
    def test_users_with_profile_get_requested_page(self, page: Page) -> None:
        assert resolve_page(page, authenticated=True, has_profile=True) == page


class TestShowNavbar:
    """Tests for show_navbar."""

    def test_hidden_on_anonymous_landing_page(self) -> None:
        assert show_navbar(Page.HOME, authenticated=False) is False

    def test_shown_on_landing_page_when_signed_in(self) -> None:
        assert show_navbar(Page.HOME, authenticated=True) is True

    def test_shown_on_other_pages(self) -> None:
        assert show_navbar(Page.LOGIN, authenticated=False) is True


class TestAppContext:
    """Tests for AppContext."""

    def test_sign_in_without_profile_routes_to_setup(self) -> None:
        context = AppContext()
        assert context.sign_in(make_user(), None) == Page.SETUP_PROFILE
        assert context.navigate(Page.SEARCH) == Page.SETUP_PROFILE

    def test_sign_in_with_profile_routes_to_profile(self) -> None:
        context = AppContext()
        assert context.sign_in(make_user(), {"id": "x"}) == Page.PROFILE
        assert context.navigate("messages") == Page.MESSAGES

    def test_set_profile_unlocks_pages(self) -> None:
        context = AppContext()
        context.sign_in(make_user(), None)
        context.set_profile({"id": "x"})
        assert context.navigate(Page.EVENTS) == Page.EVENTS

    def test_sign_out_clears_state(self) -> None:
        context = AppContext()
        context.sign_in(make_user(), {"id": "x"})

        assert context.sign_out() == Page.HOME
        assert context.user is None
        assert context.profile is None
        assert context.show_navbar is False
        assert context.navigate(Page.MATCHES) == Page.HOME
