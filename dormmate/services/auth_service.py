"""Authentication business logic service."""

import logging
from typing import Any

from supabase import AsyncClient

from dormmate.api.middleware.error_handler import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)


class AuthService:
    """Service for signing users up, in and out.

    Each instance wraps its own anonymous client, so session state set by
    one sign-in never leaks into another request.
    """

    def __init__(self, client: AsyncClient) -> None:
        """Initialize auth service with an isolated Supabase client."""
        self.client = client

    async def signup(self, email: str, password: str) -> dict[str, Any]:
        """Sign up a new user with email and password.

        Args:
            email: User's email address.
            password: User's password.

        Returns:
            dict: user_id, email and, when the project does not require
                email confirmation, the new session's tokens.

        Raises:
            ValidationError: If signup fails (e.g., email already exists).
        """
        try:
            response = await self.client.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            error_msg = str(e)
            logger.error("Signup failed: %s", error_msg)

            if "already registered" in error_msg.lower() or "already exists" in error_msg.lower():
                raise ValidationError("An account with this email already exists") from e
            if "invalid email" in error_msg.lower():
                raise ValidationError("Invalid email address") from e
            if "password" in error_msg.lower() and "weak" in error_msg.lower():
                raise ValidationError("Password is too weak. Please use a stronger password.") from e

            raise ValidationError(f"Signup failed: {error_msg}") from e

        if not response.user:
            raise ValidationError("Failed to create user account")

        user = response.user
        session = response.session
        logger.info("User signed up: %s", user.id)

        return {
            "user_id": str(user.id),
            "email": user.email or email,
            "access_token": session.access_token if session else None,
            "refresh_token": session.refresh_token if session else None,
            "message": (
                "Account created"
                if session
                else "Account created. Please check your email to verify your account."
            ),
        }

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Login user with email and password.

        Returns:
            dict: Login response with access_token, refresh_token, and user info.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        try:
            response = await self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            error_msg = str(e)
            logger.error("Login failed: %s", error_msg)

            if "email not confirmed" in error_msg.lower() or "not verified" in error_msg.lower():
                raise AuthenticationError("Please verify your email before logging in") from e
            if "invalid" in error_msg.lower():
                raise AuthenticationError("Invalid email or password") from e

            raise AuthenticationError(f"Login failed: {error_msg}") from e

        if not response.user or not response.session:
            raise AuthenticationError("Login failed: No session created")

        user = response.user
        session = response.session
        logger.info("User logged in: %s", user.id)

        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "user_id": str(user.id),
            "email": user.email or email,
            "expires_in": session.expires_in or 3600,
        }

    async def logout(self, access_token: str) -> dict[str, Any]:
        """Revoke the session behind an access token.

        Failures are logged only; the client discards its tokens either way.
        """
        try:
            await self.client.auth.admin.sign_out(access_token)
            logger.info("User logged out")
        except Exception as e:
            logger.error("Logout failed: %s", str(e))

        return {"message": "Logged out successfully"}

    async def refresh_token(self, refresh_token: str) -> dict[str, Any]:
        """Exchange a refresh token for a new session.

        Raises:
            AuthenticationError: If the refresh token is rejected.
        """
        try:
            response = await self.client.auth.refresh_session(refresh_token)
        except Exception as e:
            logger.error("Token refresh failed: %s", str(e))
            raise AuthenticationError("Invalid or expired refresh token") from e

        if not response.session or not response.user:
            raise AuthenticationError("Failed to refresh token")

        session = response.session
        user = response.user
        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "user_id": str(user.id),
            "email": user.email or "",
            "expires_in": session.expires_in or 3600,
        }
