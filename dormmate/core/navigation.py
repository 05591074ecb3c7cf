"""Page routing for the single-page client.

The client keeps one "current page" key; which page is actually shown
depends on whether somebody is signed in and whether they have finished
profile setup.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dormmate.schemas.auth import UserContext

logger = logging.getLogger(__name__)


class Page(str, Enum):
    """Pages of the client application."""

    HOME = "home"
    LOGIN = "login"
    REGISTER = "register"
    SETUP_PROFILE = "setup-profile"
    SEARCH = "search"
    MESSAGES = "messages"
    EVENTS = "events"
    MATCHES = "matches"
    PROFILE = "profile"


PUBLIC_PAGES = frozenset({Page.HOME, Page.LOGIN, Page.REGISTER})

# Navbar entries for signed-in users, in display order
NAVBAR_ITEMS: tuple[tuple[Page, str], ...] = (
    (Page.SEARCH, "Поиск"),
    (Page.MATCHES, "Совпадения"),
    (Page.MESSAGES, "Сообщения"),
    (Page.EVENTS, "События"),
    (Page.PROFILE, "Профиль"),
)


def resolve_page(requested: Page, *, authenticated: bool, has_profile: bool) -> Page:
    """Return the page to render for a requested page.

    Anonymous users only reach the public pages; anything else falls back
    to home. Signed-in users without a profile are held on setup.

    Args:
        requested: The page the user navigated to.
        authenticated: Whether a user is signed in.
        has_profile: Whether the signed-in user has a profile.

    Returns:
        Page: The page to render.
    """
    if not authenticated:
        return requested if requested in PUBLIC_PAGES else Page.HOME
    if not has_profile:
        return Page.SETUP_PROFILE
    return requested


def show_navbar(page: Page, *, authenticated: bool) -> bool:
    """The navbar is hidden only on the anonymous landing page."""
    return page is not Page.HOME or authenticated


@dataclass
class AppContext:
    """Per-client application state: current page and signed-in user.

    Set at sign-in, cleared at sign-out.
    """

    current_page: Page = Page.HOME
    user: UserContext | None = None
    profile: dict[str, Any] | None = field(default=None, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def page(self) -> Page:
        """The page actually rendered for the current state."""
        return resolve_page(
            self.current_page,
            authenticated=self.is_authenticated,
            has_profile=self.profile is not None,
        )

    @property
    def show_navbar(self) -> bool:
        return show_navbar(self.current_page, authenticated=self.is_authenticated)

    def navigate(self, page: Page | str) -> Page:
        """Switch the current page key and return the page to render."""
        self.current_page = Page(page)
        return self.page

    def sign_in(self, user: UserContext, profile: dict[str, Any] | None) -> Page:
        """Record a signed-in user and route to profile or setup."""
        self.user = user
        self.profile = profile
        logger.info("User %s signed in (profile=%s)", user.user_id, profile is not None)
        return self.navigate(Page.PROFILE if profile else Page.SETUP_PROFILE)

    def set_profile(self, profile: dict[str, Any]) -> None:
        self.profile = profile

    def sign_out(self) -> Page:
        """Forget the user and return to the landing page."""
        self.user = None
        self.profile = None
        return self.navigate(Page.HOME)
