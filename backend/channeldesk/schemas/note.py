from datetime import datetime

from pydantic import Field, field_validator, model_validator

from channeldesk.models.note import NOTE_CATEGORIES
from channeldesk.schemas.common import CamelModel, Envelope


def _check_category(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    if value not in NOTE_CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(NOTE_CATEGORIES)}")
    return value


class NoteResponse(CamelModel):
    """Note response schema."""

    id: int
    video_id: int
    user_id: int
    title: str
    content: str
    category: str | None = None
    priority: int
    is_completed: bool
    created_at: datetime
    updated_at: datetime


class NoteVideoSummary(CamelModel):
    """Short description of the video a note belongs to."""

    id: int
    title: str
    youtube_video_id: str
    thumbnail_url: str | None = None


class NoteWithVideo(NoteResponse):
    video: NoteVideoSummary


class NoteCreate(CamelModel):
    """Request body for creating a note."""

    video_id: int
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1, max_length=5000)
    category: str | None = None
    priority: int = Field(1, ge=1, le=5)

    @field_validator("category")
    @classmethod
    def check_category(cls, value: str | None) -> str | None:
        return _check_category(value)


class NotePatch(CamelModel):
    """Partial update of a note. Only fields present in the request are applied."""

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1, max_length=5000)
    category: str | None = None
    priority: int | None = Field(None, ge=1, le=5)
    is_completed: bool | None = None

    @field_validator("category")
    @classmethod
    def check_category(cls, value: str | None) -> str | None:
        return _check_category(value)

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in ("title", "content", "priority", "is_completed"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class NoteCategoriesResponse(Envelope):
    categories: list[str]
    priorities: dict[int, str]


class NoteEnvelope(Envelope):
    note: NoteResponse


class NoteListEnvelope(Envelope):
    notes: list[NoteResponse]
    total_count: int


class NoteSearchEnvelope(Envelope):
    notes: list[NoteWithVideo]
    total_count: int
    search_query: str | None = None
