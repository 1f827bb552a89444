from channeldesk.schemas.common import CamelModel, Envelope, MessageResponse
from channeldesk.schemas.auth import (
    ExternalAuthRequest,
    AuthResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
    YouTubeTokenRequest,
    TokenData,
)
from channeldesk.schemas.user import UserResponse, UserEnvelope
from channeldesk.schemas.video import (
    VideoResponse,
    VideoSyncRequest,
    VideoPatch,
    RemoteVideo,
    VideoEnvelope,
    VideoListEnvelope,
    RemoteVideoListEnvelope,
)
from channeldesk.schemas.comment import (
    CommentResponse,
    CommentCreate,
    ReplyCreate,
    CommentEnvelope,
    ReplyEnvelope,
    CommentListEnvelope,
    CommentImportEnvelope,
)
from channeldesk.schemas.note import (
    NoteResponse,
    NoteWithVideo,
    NoteCreate,
    NotePatch,
    NoteEnvelope,
    NoteListEnvelope,
    NoteSearchEnvelope,
    NoteCategoriesResponse,
)

__all__ = [
    "CamelModel",
    "Envelope",
    "MessageResponse",
    "ExternalAuthRequest",
    "AuthResponse",
    "RefreshTokenRequest",
    "AccessTokenResponse",
    "YouTubeTokenRequest",
    "TokenData",
    "UserResponse",
    "UserEnvelope",
    "VideoResponse",
    "VideoSyncRequest",
    "VideoPatch",
    "RemoteVideo",
    "VideoEnvelope",
    "VideoListEnvelope",
    "RemoteVideoListEnvelope",
    "CommentResponse",
    "CommentCreate",
    "ReplyCreate",
    "CommentEnvelope",
    "ReplyEnvelope",
    "CommentListEnvelope",
    "CommentImportEnvelope",
    "NoteResponse",
    "NoteWithVideo",
    "NoteCreate",
    "NotePatch",
    "NoteEnvelope",
    "NoteListEnvelope",
    "NoteSearchEnvelope",
    "NoteCategoriesResponse",
]
