"""Request-scoped dependencies: authenticated context, stores and external adapters."""

from typing import Annotated, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from channeldesk.context import AuthContext
from channeldesk.database import get_db
from channeldesk.exceptions import Unauthenticated
from channeldesk.models.user import User
from channeldesk.redis_client import RedisClient, get_redis
from channeldesk.services.auth_service import AuthService
from channeldesk.services.comment_service import CommentStore
from channeldesk.services.identity_service import IdentityResolver
from channeldesk.services.note_service import NoteStore
from channeldesk.services.video_service import VideoStore
from channeldesk.services.youtube_service import YouTubeService

bearer_scheme = HTTPBearer(auto_error=False)

YouTubeFactory = Callable[[User], YouTubeService]


def get_auth_context(
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> AuthContext:
    """Resolve the bearer access token to an AuthContext."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    user = AuthService.verify(db, credentials.credentials)
    return AuthContext(user=user)


def get_current_user(
    context: Annotated[AuthContext, Depends(get_auth_context)],
) -> User:
    """Dependency for routes that only need the user row."""
    return context.user


def get_youtube_factory() -> YouTubeFactory:
    """Dependency returning the callable that builds a YouTube adapter for a user."""
    return YouTubeService


def get_video_store(
    db: Annotated[Session, Depends(get_db)],
    context: Annotated[AuthContext, Depends(get_auth_context)],
    youtube_factory: Annotated[YouTubeFactory, Depends(get_youtube_factory)],
    cache: Annotated[RedisClient, Depends(get_redis)],
) -> VideoStore:
    return VideoStore(db, context, youtube_factory=youtube_factory, cache=cache)


def get_comment_store(
    db: Annotated[Session, Depends(get_db)],
    context: Annotated[AuthContext, Depends(get_auth_context)],
    youtube_factory: Annotated[YouTubeFactory, Depends(get_youtube_factory)],
) -> CommentStore:
    return CommentStore(db, context, youtube_factory=youtube_factory)


def get_note_store(
    db: Annotated[Session, Depends(get_db)],
    context: Annotated[AuthContext, Depends(get_auth_context)],
) -> NoteStore:
    return NoteStore(db, context)


def get_identity_resolver() -> IdentityResolver:
    return IdentityResolver()
