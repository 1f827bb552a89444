"""Tests for dashboard state persistence and view formatting."""

from datetime import datetime

from channeldesk.dashboard.state import DashboardState
from channeldesk.dashboard.views import (
    comment_thread,
    format_compact_number,
    format_date,
    notes_section,
    priority_label,
    truncate_text,
    video_detail,
    video_grid,
)
from channeldesk.schemas.comment import CommentResponse
from channeldesk.schemas.note import NoteResponse
from channeldesk.schemas.user import UserResponse
from channeldesk.schemas.video import VideoCounts, VideoResponse

NOW = datetime(2024, 3, 4, 21, 15)


def video(video_id=1, **overrides):
    fields = dict(
        id=video_id,
        user_id=3,
        youtube_video_id=f"yt{video_id:09d}",
        title="A video",
        view_count=1234,
        like_count=56,
        comment_count=7,
        published_at=NOW,
        created_at=NOW,
        updated_at=NOW,
        counts=VideoCounts(comments=2, notes=1),
    )
    fields.update(overrides)
    return VideoResponse(**fields)


def comment(comment_id, is_reply=False, parent=None, text="hi"):
    return CommentResponse(
        id=len(comment_id),
        video_id=1,
        youtube_comment_id=comment_id,
        author_name="Viewer",
        text_display=text,
        like_count=1500,
        published_at=NOW,
        is_reply=is_reply,
        parent_comment_id=parent,
        created_at=NOW,
    )


def note(note_id, priority=1, completed=False):
    return NoteResponse(
        id=note_id,
        video_id=1,
        user_id=3,
        title=f"Note {note_id}",
        content="body",
        priority=priority,
        is_completed=completed,
        created_at=NOW,
        updated_at=NOW,
    )


class TestFormatting:
    def test_compact_numbers(self):
        assert format_compact_number(999) == "999"
        assert format_compact_number(1234) == "1.2K"
        assert format_compact_number(5_600_000) == "5.6M"
        assert format_compact_number(2_000_000_000) == "2.0B"

    def test_format_date(self):
        assert format_date(NOW) == "Mar 4, 2024, 09:15 PM"
        assert format_date("2024-03-04T21:15:00Z").startswith("Mar 4, 2024")
        assert format_date(None) == ""

    def test_truncate(self):
        assert truncate_text("short", 10) == "short"
        assert truncate_text("a longer sentence", 8) == "a longer..."
        assert truncate_text(None, 5) == ""

    def test_priority_labels(self):
        assert [priority_label(p) for p in range(1, 6)] == [
            "Low",
            "Medium",
            "High",
            "Urgent",
            "Critical",
        ]


class TestPersistence:
    def test_snapshot_keeps_only_persisted_slice(self):
        state = DashboardState(
            user=UserResponse(id=3, email="c@example.com"),
            videos=[video()],
            selected_video_id=1,
            comments=[comment("c1")],
            notes=[note(1)],
            loading=True,
            editing_video=True,
        )

        snapshot = state.snapshot()

        assert set(snapshot) == {"user", "videos", "selected_video_id"}
        assert snapshot["videos"][0]["youtubeVideoId"] == "yt000000001"

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        DashboardState(videos=[video()], selected_video_id=1).save(path)

        restored = DashboardState.load(path)

        assert restored.selected_video.title == "A video"
        assert restored.loading is False

    def test_load_missing_or_corrupt(self, tmp_path):
        assert DashboardState.load(tmp_path / "absent.json").user is None

        corrupt = tmp_path / "corrupt.json"
        corrupt.write_text("{not json")
        assert DashboardState.load(corrupt).videos == []

    def test_notifications_drain(self):
        state = DashboardState()
        state.notify("error", "Failed")

        assert [n.message for n in state.drain_notifications()] == ["Failed"]
        assert state.notifications == []


class TestViews:
    def test_video_grid_marks_selection(self):
        state = DashboardState(videos=[video(1), video(2)], selected_video_id=2)

        cards = video_grid(state)

        assert [c.selected for c in cards] == [False, True]
        assert cards[0].views == "1.2K"
        assert cards[0].notes == 1

    def test_video_detail(self):
        state = DashboardState(videos=[video(1)], selected_video_id=1)

        detail = video_detail(state)

        assert detail.views == "1,234"
        assert detail.watch_url == "https://www.youtube.com/watch?v=yt000000001"
        assert video_detail(DashboardState()) is None

    def test_comment_thread_nests_replies(self):
        state = DashboardState(
            comments=[
                comment("top"),
                comment("local_abc"),
                comment("reply", is_reply=True, parent="top"),
                comment("orphan", is_reply=True, parent="gone"),
            ]
        )

        thread = comment_thread(state)

        assert [c.youtube_comment_id for c in thread] == ["top", "local_abc", "orphan"]
        assert [r.text for r in thread[0].replies] == ["hi"]
        assert thread[1].is_local is True
        assert (thread[0].can_reply, thread[1].can_reply) == (True, False)
        assert thread[0].likes == "1.5K"
        assert thread[2].can_reply is False

    def test_notes_section_counts(self):
        state = DashboardState(notes=[note(1, priority=5), note(2, completed=True)])

        section = notes_section(state)

        assert (section.open_count, section.completed_count) == (1, 1)
        assert section.notes[0].priority == "Critical"
