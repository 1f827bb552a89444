from channeldesk.models.user import User
from channeldesk.models.video import Video
from channeldesk.models.comment import Comment
from channeldesk.models.note import Note

__all__ = [
    "User",
    "Video",
    "Comment",
    "Note",
]
