"""Pytest configuration and fixtures."""

import os
import time
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from fastapi.testclient import TestClient
from jwt.algorithms import ECAlgorithm

# Signing key for test tokens; its public half is configured as the verification key
TEST_PRIVATE_KEY = ec.generate_private_key(ec.SECP256R1())

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ["SUPABASE_SIGNING_KEY_JWK"] = ECAlgorithm.to_jwk(TEST_PRIVATE_KEY.public_key())

TEST_USER_ID = "550e8400-e29b-41d4-a716-446655440000"
OTHER_USER_ID = "660e8400-e29b-41d4-a716-446655440000"

# Query builder methods that return the builder itself
BUILDER_METHODS = (
    "select",
    "eq",
    "neq",
    "or_",
    "in_",
    "lt",
    "gte",
    "order",
    "limit",
    "maybe_single",
    "single",
    "insert",
    "upsert",
    "update",
    "delete",
)


def create_test_token(
    sub: str = TEST_USER_ID,
    email: str | None = "test@example.com",
    exp_offset: int = 3600,
    audience: str = "authenticated",
    key: Any = None,
) -> str:
    """Create an ES256 access token shaped like the ones Supabase issues.

    Args:
        sub: Subject (user ID).
        email: User email.
        exp_offset: Seconds from now for expiration (negative for expired).
        audience: Audience claim.
        key: Private key to sign with, defaults to the configured test key.

    Returns:
        str: Encoded JWT.
    """
    now = int(time.time())
    payload = {
        "sub": sub,
        "email": email,
        "role": "authenticated",
        "exp": now + exp_offset,
        "iat": now,
        "aud": audience,
        "iss": "https://test-project.supabase.co/auth/v1",
    }
    return jwt.encode(payload, key or TEST_PRIVATE_KEY, algorithm="ES256")


def response(data: Any = None, count: int | None = None) -> MagicMock:
    """A PostgREST response carrying ``data``."""
    result = MagicMock()
    result.data = data
    result.count = count
    return result


def make_query(*results: Any) -> MagicMock:
    """A query builder whose ``execute`` returns each result in turn.

    Results that are not MagicMocks are wrapped with :func:`response`.
    With a single result every execution returns it.
    """
    query = MagicMock()
    for name in BUILDER_METHODS:
        getattr(query, name).return_value = query

    wrapped = [r if isinstance(r, MagicMock) else response(r) for r in results] or [response([])]
    if len(wrapped) == 1:
        query.execute = AsyncMock(return_value=wrapped[0])
    else:
        query.execute = AsyncMock(side_effect=wrapped)
    return query


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from dormmate.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture
def token_factory() -> Callable[..., str]:
    return create_test_token


@pytest.fixture
def query_factory() -> Callable[..., MagicMock]:
    return make_query


@pytest.fixture
def response_factory() -> Callable[..., MagicMock]:
    return response


@pytest.fixture
def supabase_client() -> MagicMock:
    """Provide a mocked async Supabase client.

    ``client.tables`` maps table names to query builders; unknown tables
    get an empty builder on first use. Tests install their own builders
    with ``client.tables["name"] = make_query(...)``.

    Returns:
        MagicMock: Mocked Supabase client.
    """
    client = MagicMock()
    client.tables = {}
    client.table.side_effect = lambda name: client.tables.setdefault(name, make_query())
    client.rpc.return_value.execute = AsyncMock(return_value=response(None))

    channel = MagicMock()
    channel.subscribe = AsyncMock(return_value=channel)
    client.channel.return_value = channel
    client.remove_channel = AsyncMock()
    return client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_token()}"}


@pytest.fixture
def client(supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client whose Supabase clients are all ``supabase_client``.

    Args:
        supabase_client: Mocked Supabase client fixture.

    Yields:
        TestClient: FastAPI test client.
    """
    from dormmate.main import app

    factory = AsyncMock(return_value=supabase_client)
    with (
        patch("dormmate.api.deps.create_user_client", factory),
        patch("dormmate.api.deps.create_anon_client", factory),
        patch("dormmate.api.routes.navigation.create_user_client", factory),
        patch("dormmate.api.routes.messaging.create_user_client", factory),
    ):
        with TestClient(app) as test_client:
            yield test_client
