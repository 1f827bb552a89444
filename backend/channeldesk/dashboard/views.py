"""View models and display formatting for the dashboard."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from channeldesk.dashboard.state import DashboardState
from channeldesk.models.comment import LOCAL_COMMENT_PREFIX
from channeldesk.models.note import PRIORITY_LABELS
from channeldesk.schemas.comment import CommentResponse
from channeldesk.schemas.note import NoteResponse
from channeldesk.schemas.video import VideoResponse

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={}"


def format_compact_number(value: int) -> str:
    """1234 -> 1.2K, 5600000 -> 5.6M."""
    if value < 1000:
        return str(value)
    if value < 1_000_000:
        return f"{value / 1000:.1f}K"
    if value < 1_000_000_000:
        return f"{value / 1_000_000:.1f}M"
    return f"{value / 1_000_000_000:.1f}B"


def format_number(value: int) -> str:
    return f"{value:,}"


def format_date(value: datetime | str | None) -> str:
    """Format as e.g. 'Mar 4, 2024, 09:15 PM'."""
    if value is None:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value:%b} {value.day}, {value.year}, {value:%I:%M %p}"


def truncate_text(text: str | None, max_length: int) -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def priority_label(priority: int) -> str:
    return PRIORITY_LABELS.get(priority, "Unknown")


@dataclass
class VideoCard:
    id: int
    title: str
    thumbnail_url: str | None
    views: str
    likes: str
    comments: str
    notes: int
    published: str
    selected: bool = False


@dataclass
class VideoDetail:
    id: int
    title: str
    description: str
    watch_url: str
    thumbnail_url: str | None
    views: str
    likes: str
    comments: str
    published: str
    synced: str


@dataclass
class CommentView:
    youtube_comment_id: str
    author: str
    text: str
    likes: str
    published: str
    is_local: bool
    can_reply: bool
    replies: List["CommentView"] = field(default_factory=list)


@dataclass
class NoteView:
    id: int
    title: str
    content: str
    category: str | None
    priority: str
    completed: bool
    created: str


@dataclass
class NotesSection:
    open_count: int
    completed_count: int
    notes: List[NoteView]


def video_card(video: VideoResponse, selected: bool = False) -> VideoCard:
    return VideoCard(
        id=video.id,
        title=truncate_text(video.title, 60),
        thumbnail_url=video.thumbnail_url,
        views=format_compact_number(video.view_count),
        likes=format_compact_number(video.like_count),
        comments=format_compact_number(video.counts.comments),
        notes=video.counts.notes,
        published=format_date(video.published_at),
        selected=selected,
    )


def video_grid(state: DashboardState) -> List[VideoCard]:
    return [video_card(v, v.id == state.selected_video_id) for v in state.videos]


def video_detail(state: DashboardState) -> VideoDetail | None:
    video = state.selected_video
    if video is None:
        return None

    return VideoDetail(
        id=video.id,
        title=video.title,
        description=video.description or "",
        watch_url=YOUTUBE_WATCH_URL.format(video.youtube_video_id),
        thumbnail_url=video.thumbnail_url,
        views=format_number(video.view_count),
        likes=format_number(video.like_count),
        comments=format_number(video.comment_count),
        published=format_date(video.published_at),
        synced=format_date(video.updated_at),
    )


def _comment_view(comment: CommentResponse) -> CommentView:
    is_local = comment.youtube_comment_id.startswith(LOCAL_COMMENT_PREFIX)
    return CommentView(
        youtube_comment_id=comment.youtube_comment_id,
        author=comment.author_name,
        text=comment.text_display,
        likes=format_compact_number(comment.like_count),
        published=format_date(comment.published_at or comment.created_at),
        is_local=is_local,
        can_reply=not (comment.is_reply or is_local),
    )


def comment_thread(state: DashboardState) -> List[CommentView]:
    """
    Top-level comments in state order, each with its replies nested below.

    Replies whose parent is not loaded are shown at the top level.
    """
    top_level = {}
    views = []
    for comment in state.comments:
        if not comment.is_reply:
            view = _comment_view(comment)
            top_level[comment.youtube_comment_id] = view
            views.append(view)

    for comment in state.comments:
        if comment.is_reply:
            parent = top_level.get(comment.parent_comment_id)
            if parent is not None:
                parent.replies.append(_comment_view(comment))
            else:
                views.append(_comment_view(comment))

    return views


def _note_view(note: NoteResponse) -> NoteView:
    return NoteView(
        id=note.id,
        title=note.title,
        content=note.content,
        category=note.category,
        priority=priority_label(note.priority),
        completed=note.is_completed,
        created=format_date(note.created_at),
    )


def notes_section(state: DashboardState) -> NotesSection:
    completed = sum(1 for n in state.notes if n.is_completed)
    return NotesSection(
        open_count=len(state.notes) - completed,
        completed_count=completed,
        notes=[_note_view(n) for n in state.notes],
    )
