"""Navigation Pydantic schemas."""

from pydantic import BaseModel, Field

from dormmate.core.navigation import Page


class NavItem(BaseModel):
    """Navbar entry."""

    key: Page = Field(description="Target page")
    label: str = Field(description="Display label")


class NavigationResponse(BaseModel):
    """Resolved page for the caller's authentication and profile state."""

    page: Page = Field(description="Page to render")
    show_navbar: bool = Field(description="Whether the navbar is visible")
    items: list[NavItem] = Field(default_factory=list, description="Navbar entries for signed-in users")
