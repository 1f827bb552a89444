from datetime import datetime

from pydantic import Field

from channeldesk.schemas.common import CamelModel, Envelope


class CommentResponse(CamelModel):
    """Comment response schema."""

    id: int
    video_id: int
    youtube_comment_id: str
    author_name: str
    author_channel_url: str | None = None
    text_display: str
    like_count: int = 0
    published_at: datetime | None = None
    updated_at: datetime | None = None
    is_reply: bool = False
    parent_comment_id: str | None = None
    created_at: datetime


class CommentCreate(CamelModel):
    """Request body for adding a top-level comment."""

    video_id: int
    text: str = Field(min_length=1, max_length=1000)
    publish: bool = False


class ReplyCreate(CamelModel):
    """Request body for replying to a comment."""

    text: str = Field(min_length=1, max_length=1000)


class CommentEnvelope(Envelope):
    comment: CommentResponse


class ReplyEnvelope(Envelope):
    reply: CommentResponse


class CommentListEnvelope(Envelope):
    comments: list[CommentResponse]
    total_count: int


class CommentImportEnvelope(Envelope):
    imported: int
    comments: list[CommentResponse]
