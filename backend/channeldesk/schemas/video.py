from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, model_validator

from channeldesk.schemas.common import CamelModel, Envelope


class VideoCounts(CamelModel):
    """Number of local comments and notes attached to a video."""

    comments: int = 0
    notes: int = 0


class VideoBase(CamelModel):
    """Base video schema."""

    youtube_video_id: str
    title: str
    description: str | None = None
    thumbnail_url: str | None = None
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    published_at: datetime | None = None


class VideoResponse(VideoBase):
    """Video response schema."""

    id: int
    user_id: int
    youtube_metadata: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime
    counts: VideoCounts = VideoCounts()


class VideoSyncRequest(CamelModel):
    """Request body for importing a YouTube video into the dashboard."""

    external_video_id: str = Field(
        min_length=1,
        max_length=20,
        validation_alias=AliasChoices(
            "externalVideoId", "youtubeVideoId", "external_video_id"
        ),
    )


class VideoPatch(CamelModel):
    """Partial update of a video's local title and description."""

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)

    @model_validator(mode="after")
    def reject_null_title(self):
        if "title" in self.model_fields_set and self.title is None:
            raise ValueError("Title must be 1-500 characters")
        return self


class RemoteVideo(CamelModel):
    """A video on the user's channel as listed by YouTube."""

    youtube_video_id: str
    title: str
    description: str | None = None
    thumbnail_url: str | None = None
    published_at: datetime | None = None
    is_synced: bool = False


class VideoEnvelope(Envelope):
    video: VideoResponse
    warning: str | None = None


class VideoListEnvelope(Envelope):
    videos: list[VideoResponse]
    total_count: int


class RemoteVideoListEnvelope(Envelope):
    videos: list[RemoteVideo]
    total_count: int
    cached: bool = False
