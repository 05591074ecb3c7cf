"""Authentication API routes."""

from fastapi import APIRouter, status

from dormmate.api.deps import AnonClient, CurrentUser, UserClient
from dormmate.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    MeResponse,
    RefreshTokenRequest,
    SignupRequest,
    SignupResponse,
)
from dormmate.services.auth_service import AuthService
from dormmate.services.profile_service import ProfileService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up new user",
    description="Create a new account with email and password.",
)
async def signup(data: SignupRequest, client: AnonClient) -> SignupResponse:
    """Sign up a new user with email and password.

    Returns tokens right away when the project does not require email
    confirmation; otherwise the user signs in after verifying.

    Raises:
        ValidationError: 422 if signup fails (e.g., email already exists).
    """
    result = await AuthService(client).signup(email=data.email, password=data.password)
    return SignupResponse(**result)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Sign in",
    description="Exchange email and password for an access and refresh token.",
)
async def login(data: LoginRequest, client: AnonClient) -> LoginResponse:
    """Sign in with email and password.

    Raises:
        AuthenticationError: 401 if the credentials are rejected.
    """
    result = await AuthService(client).login(email=data.email, password=data.password)
    return LoginResponse(**result)


@router.post(
    "/refresh",
    response_model=LoginResponse,
    summary="Refresh access token",
    description="Exchange a refresh token for a new session.",
)
async def refresh(data: RefreshTokenRequest, client: AnonClient) -> LoginResponse:
    result = await AuthService(client).refresh_token(data.refresh_token)
    return LoginResponse(**result)


@router.post(
    "/logout",
    response_model=LogoutResponse,
    summary="Sign out",
    description="Revoke the caller's session.",
)
async def logout(user: CurrentUser, client: AnonClient) -> LogoutResponse:
    result = await AuthService(client).logout(user.access_token)
    return LogoutResponse(**result)


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Current user",
    description="Returns the signed-in user and whether profile setup is complete.",
)
async def me(user: CurrentUser, client: UserClient) -> MeResponse:
    profile = await ProfileService(client).get_profile(user.user_id)
    return MeResponse(user_id=str(user.user_id), email=user.email, has_profile=profile is not None)
