from channeldesk.services.auth_service import AuthService
from channeldesk.services.identity_service import IdentityResolver, ExternalIdentity
from channeldesk.services.youtube_service import YouTubeService
from channeldesk.services.video_service import VideoStore
from channeldesk.services.comment_service import CommentStore
from channeldesk.services.note_service import NoteStore

__all__ = [
    "AuthService",
    "IdentityResolver",
    "ExternalIdentity",
    "YouTubeService",
    "VideoStore",
    "CommentStore",
    "NoteStore",
]
