"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from supabase import AsyncClient

from dormmate.api.middleware.auth import AuthError, AuthErrorCode, verify_access_token
from dormmate.core.supabase import create_anon_client, create_user_client
from dormmate.schemas.auth import UserContext


def _bearer_token(authorization: str) -> str:
    """Extract the token from a "Bearer <token>" header value."""
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return parts[1]


async def authenticate_token(token: str) -> UserContext:
    """Validate a raw access token, mapping failures to 401.

    Raises:
        HTTPException: 401 if the token is invalid or expired.
    """
    try:
        return await verify_access_token(token)
    except AuthError as e:
        detail = "Token has expired" if e.code == AuthErrorCode.TOKEN_EXPIRED else e.message
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Extract and validate the current user from the Authorization header.

    This dependency requires a valid access token in the Authorization header.
    Use this for endpoints that require authentication.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        UserContext: The authenticated user's context.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return await authenticate_token(_bearer_token(authorization))


async def get_optional_user(
    authorization: Annotated[str | None, Header()] = None,
) -> UserContext | None:
    """Extract the current user if an Authorization header is present.

    Returns None if no token is provided. A token that is present but
    invalid is still rejected.
    """
    if not authorization:
        return None
    return await get_current_user(authorization)


async def get_user_client(user: Annotated[UserContext, Depends(get_current_user)]) -> AsyncClient:
    """Supabase client acting as the current user."""
    return await create_user_client(user.access_token)


async def get_anon_client() -> AsyncClient:
    """Supabase client authenticated only by the anonymous key."""
    return await create_anon_client()


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[UserContext, Depends(get_current_user)]
OptionalUser = Annotated[UserContext | None, Depends(get_optional_user)]
UserClient = Annotated[AsyncClient, Depends(get_user_client)]
AnonClient = Annotated[AsyncClient, Depends(get_anon_client)]
