"""JWT authentication middleware and utilities."""

import json
import logging
from enum import Enum
from functools import lru_cache
from typing import Any

import jwt
from jwt import PyJWK

from dormmate.core.config import get_settings
from dormmate.core.supabase import create_anon_client
from dormmate.schemas.auth import TokenPayload, UserContext

logger = logging.getLogger(__name__)

# Audience claim Supabase puts on signed-in user tokens
TOKEN_AUDIENCE = "authenticated"


class AuthErrorCode(str, Enum):
    """Authentication error codes."""

    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class AuthError(Exception):
    """Authentication error with specific error code.

    Raised when token validation fails for any reason.
    The error code indicates the specific failure reason.
    """

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        """Initialize authentication error.

        Args:
            message: Human-readable error description.
            code: Specific error code for programmatic handling.
        """
        self.message = message
        self.code = code
        super().__init__(message)


@lru_cache
def get_signing_key() -> Any:
    """Load the public key from the signing key JWK setting.

    Returns:
        Public key for JWT verification.
    """
    jwk_json = get_settings().supabase_signing_key_jwk

    if not jwk_json:
        raise AuthError("Signing key not configured", AuthErrorCode.INVALID_TOKEN)

    try:
        jwk_data = json.loads(jwk_json)
    except json.JSONDecodeError as e:
        raise AuthError(f"Invalid signing key JWK format: {e}", AuthErrorCode.INVALID_TOKEN) from e

    return PyJWK.from_dict(jwk_data).key


def decode_jwt(token: str) -> TokenPayload:
    """Decode and validate a Supabase access token locally.

    Validates signature (ES256), expiration, audience and required claims.

    Args:
        token: The JWT string to decode.

    Returns:
        TokenPayload: Validated token payload.

    Raises:
        AuthError: If the token is invalid, expired, or has a wrong signature.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            get_signing_key(),
            algorithms=["ES256"],
            audience=TOKEN_AUDIENCE,
            options={"require": ["exp", "iat", "sub"]},
        )
    except AuthError:
        raise
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired", AuthErrorCode.TOKEN_EXPIRED) from e
    except jwt.InvalidSignatureError as e:
        raise AuthError("Invalid token signature", AuthErrorCode.INVALID_SIGNATURE) from e
    except jwt.InvalidAudienceError as e:
        raise AuthError("Token audience is not accepted", AuthErrorCode.INVALID_TOKEN) from e
    except jwt.MissingRequiredClaimError as e:
        raise AuthError(f"Token missing required claim: {e}", AuthErrorCode.INVALID_TOKEN) from e
    except jwt.PyJWTError as e:
        raise AuthError(f"Invalid token: {e}", AuthErrorCode.INVALID_TOKEN) from e

    return TokenPayload(
        sub=payload["sub"],
        email=payload.get("email"),
        role=payload.get("role"),
        exp=payload["exp"],
        iat=payload["iat"],
        aud=payload.get("aud"),
        iss=payload.get("iss"),
    )


async def verify_access_token(token: str) -> UserContext:
    """Resolve an access token to the user it belongs to.

    Tokens are checked locally when a signing key is configured, otherwise
    the auth server is asked for the token's user.

    Raises:
        AuthError: If the token is not accepted.
    """
    if get_settings().supabase_signing_key_jwk:
        return decode_jwt(token).to_user_context(token)

    client = await create_anon_client()
    try:
        response = await client.auth.get_user(token)
    except Exception as e:
        logger.info("Auth server rejected token: %s", e)
        raise AuthError("Invalid or expired token", AuthErrorCode.INVALID_TOKEN) from e

    if not response or not response.user:
        raise AuthError("Invalid or expired token", AuthErrorCode.INVALID_TOKEN)

    user = response.user
    return UserContext(user_id=user.id, email=user.email, role=user.role, access_token=token)
