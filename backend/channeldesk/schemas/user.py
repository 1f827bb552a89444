from datetime import datetime

from channeldesk.schemas.common import CamelModel, Envelope


class UserResponse(CamelModel):
    """User response schema."""

    id: int
    email: str
    name: str | None = None
    picture_url: str | None = None
    has_youtube_access: bool = False
    created_at: datetime | None = None


class UserEnvelope(Envelope):
    user: UserResponse
