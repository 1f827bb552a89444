"""Dashboard state: the persisted slice plus transient UI flags."""

import json
from pathlib import Path
from typing import Any, Dict, List, Literal

from pydantic import BaseModel

from channeldesk.logger import dashboard_logger
from channeldesk.schemas.comment import CommentResponse
from channeldesk.schemas.note import NoteResponse, NoteWithVideo
from channeldesk.schemas.user import UserResponse
from channeldesk.schemas.video import VideoResponse

# Only these fields survive a reload
PERSISTED_FIELDS = {"user", "videos", "selected_video_id"}


class Notification(BaseModel):
    level: Literal["success", "warning", "error"]
    message: str


class NoteFilters(BaseModel):
    query: str = ""
    category: str | None = None


class DashboardState(BaseModel):
    """Everything the dashboard renders from."""

    user: UserResponse | None = None
    videos: List[VideoResponse] = []
    selected_video_id: int | None = None

    comments: List[CommentResponse] = []
    notes: List[NoteResponse] = []
    search_results: List[NoteWithVideo] = []

    loading: bool = False
    error: str | None = None

    editing_video: bool = False
    adding_note: bool = False
    editing_note_id: int | None = None
    confirming_deletion: bool = False
    replying_to: str | None = None
    note_filters: NoteFilters = NoteFilters()

    notifications: List[Notification] = []

    @property
    def selected_video(self) -> VideoResponse | None:
        for video in self.videos:
            if video.id == self.selected_video_id:
                return video
        return None

    def notify(self, level: str, message: str):
        self.notifications.append(Notification(level=level, message=message))

    def drain_notifications(self) -> List[Notification]:
        """Return pending notifications and clear the queue."""
        pending, self.notifications = self.notifications, []
        return pending

    def clear_selection(self):
        self.selected_video_id = None
        self.comments = []
        self.notes = []
        self.editing_video = False
        self.adding_note = False
        self.editing_note_id = None
        self.confirming_deletion = False
        self.replying_to = None

    def snapshot(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, include=PERSISTED_FIELDS)

    @classmethod
    def hydrate(cls, data: Dict[str, Any]) -> "DashboardState":
        return cls.model_validate(
            {key: value for key, value in data.items() if key in PERSISTED_FIELDS}
        )

    def save(self, path: str | Path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.snapshot(), indent=2))

    @classmethod
    def load(cls, path: str | Path) -> "DashboardState":
        """
        Restore the persisted slice from disk.

        A missing or unreadable file yields a fresh, signed-out state.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            return cls.hydrate(json.loads(path.read_text()))
        except ValueError as e:
            dashboard_logger.warning(f"Ignoring unreadable dashboard state {path}: {e}")
            return cls()
