"""Authentication router for Google sign-in and local JWT tokens."""

from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from channeldesk.database import get_db
from channeldesk.dependencies import get_current_user, get_identity_resolver
from channeldesk.logger import auth_logger
from channeldesk.models.user import User
from channeldesk.schemas.auth import (
    AccessTokenResponse,
    AuthResponse,
    ExternalAuthRequest,
    RefreshTokenRequest,
    YouTubeTokenRequest,
)
from channeldesk.schemas.common import MessageResponse
from channeldesk.schemas.user import UserEnvelope, UserResponse
from channeldesk.services.auth_service import AuthService, REFRESH_TOKEN_TYPE
from channeldesk.services.identity_service import IdentityResolver

router = APIRouter(prefix="/auth")


@router.post("/external", response_model=AuthResponse)
@router.post("/google", response_model=AuthResponse, include_in_schema=False)
async def external_login(
    payload: ExternalAuthRequest,
    db: Annotated[Session, Depends(get_db)],
    resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
):
    """
    Exchange a Google credential for local access and refresh tokens.

    Accepts either a Google ID token or an OAuth access token. The user is
    created on first sign-in and the credential is stored for YouTube calls.
    """
    user = resolver.resolve(db, payload.credential)
    tokens = AuthService.create_tokens_for_user(user)

    auth_logger.info(f"User {user.id} signed in")

    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens["access_token"],
        refresh_token=tokens["refresh_token"],
    )


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh_access_token(
    payload: RefreshTokenRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Issue a new access token from a refresh token.

    Access tokens are rejected here; the refresh token itself is not rotated.
    """
    user = AuthService.verify(db, payload.refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    return AccessTokenResponse(access_token=AuthService.issue_access(user.id))


@router.get("/me", response_model=UserEnvelope)
async def get_me(current_user: Annotated[User, Depends(get_current_user)]):
    """Return the signed-in user."""
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.post("/youtube-token", response_model=MessageResponse)
async def store_youtube_token(
    payload: YouTubeTokenRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Store a YouTube OAuth token pair obtained by the client."""
    current_user.access_token = payload.access_token
    current_user.refresh_token = payload.refresh_token
    db.commit()

    return MessageResponse(message="YouTube access token stored successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: Annotated[User, Depends(get_current_user)]):
    """Tokens are stateless; logging out only needs the client to drop them."""
    auth_logger.info(f"User {current_user.id} logged out")
    return MessageResponse(message="Logged out successfully")
