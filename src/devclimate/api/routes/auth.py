"""Authentication routes.

Handles registration, login and the current user's profile.

## Endpoints

1. POST /api/auth/register - Create an account, returns an access token
2. POST /api/auth/login - Exchange email/password for an access token
3. GET /api/auth/profile - Get the current user (requires a token)

Register and login only exist with the self-issued token strategy; with a
hosted identity provider, sign-up and sign-in happen at the provider.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, status

from devclimate.api.dependencies import get_app_settings, get_credential_store
from devclimate.api.schemas import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    UserProfile,
    UserSummary,
)
from devclimate.auth.dependencies import get_current_identity
from devclimate.auth.identity import UserIdentity
from devclimate.auth.tokens import TokenClaims, issue_token
from devclimate.config import Settings
from devclimate.database.models import User
from devclimate.services.users import CredentialStore

logger = logging.getLogger(__name__)

# Mounted only with AUTH_STRATEGY=token
credentials_router = APIRouter()

router = APIRouter()


def _auth_response(message: str, user: User, settings: Settings) -> AuthResponse:
    token = issue_token(
        TokenClaims(user_id=str(user.id), username=user.username, email=user.email),
        settings.secret_key,
        ttl=timedelta(seconds=settings.token_ttl_seconds),
    )
    return AuthResponse(
        message=message,
        token=token,
        user=UserSummary(id=user.id, username=user.username, email=user.email),
    )


@credentials_router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    data: RegisterRequest,
    store: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    """Register a new user and log them in."""
    user = await store.register_user(data.username, data.email, data.password)
    return _auth_response("User registered successfully", user, settings)


@credentials_router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    """Log in with email and password."""
    user = await store.authenticate(data.email, data.password)
    return _auth_response("Login successful", user, settings)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    identity: UserIdentity = Depends(get_current_identity),
    store: CredentialStore = Depends(get_credential_store),
) -> ProfileResponse:
    """Get the current user's profile."""
    user = await store.get_profile(identity.user_id)
    return ProfileResponse(user=UserProfile.model_validate(user))
