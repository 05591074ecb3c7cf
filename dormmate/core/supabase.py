"""Supabase async client factories for database, auth and realtime operations."""

from typing import Any

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from supabase_auth import AsyncMemoryStorage

from dormmate.core.config import get_settings


def _client_options(headers: dict[str, str] | None = None) -> AsyncClientOptions:
    """Build isolated client options.

    Sessions live in memory only and are never refreshed in the background;
    the caller owns the token lifecycle.
    """
    return AsyncClientOptions(
        headers=headers or {},
        storage=AsyncMemoryStorage(),
        auto_refresh_token=False,
        persist_session=False,
    )


async def create_anon_client() -> AsyncClient:
    """Create a Supabase client authenticated only by the anonymous key.

    Use this for auth operations (sign in, sign up, refresh) and for
    public reference data. Each call creates a new isolated client so
    auth state never leaks between requests.

    Returns:
        AsyncClient: Fresh Supabase client instance.
    """
    settings = get_settings()
    return await acreate_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=_client_options(),
    )


async def create_user_client(access_token: str) -> AsyncClient:
    """Create a Supabase client acting as the signed-in user.

    The user's JWT is sent as the bearer token for PostgREST requests and
    realtime channel joins, so row-level security applies exactly as it
    would for the browser client.

    Args:
        access_token: The user's Supabase access token.

    Returns:
        AsyncClient: Supabase client scoped to the user.
    """
    settings = get_settings()
    client = await acreate_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=_client_options({"Authorization": f"Bearer {access_token}"}),
    )
    await client.realtime.set_auth(access_token)
    return client


async def check_database_connection() -> dict[str, Any]:
    """Check if database connection is healthy.

    Performs a simple query against public reference data.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        client = await create_anon_client()
        await client.table("interests").select("id").limit(1).execute()
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
