"""Dashboard actions: call the API, then apply the result to local state."""

from pathlib import Path
from typing import Any, Awaitable, TypeVar

from channeldesk.config import settings
from channeldesk.dashboard.client import ApiError, DashboardClient
from channeldesk.dashboard.state import DashboardState
from channeldesk.logger import dashboard_logger

T = TypeVar("T")


class DashboardController:
    """
    Drives a DashboardState through a DashboardClient.

    Local state is only changed after the API call succeeds. A failed call
    queues an error notification and leaves state as it was.
    The persisted slice is written to `state_path`, which defaults to
    `settings.dashboard_state_path`.
    """

    def __init__(
        self,
        client: DashboardClient,
        state: DashboardState | None = None,
        state_path: str | Path | None = None,
    ):
        self.client = client
        self.state = state or DashboardState()
        self.state_path = Path(state_path or settings.dashboard_state_path)

    async def _call(self, failure_message: str, request: Awaitable[T]) -> T | None:
        """Await a client call, turning ApiError into a notification."""
        self.state.loading = True
        self.state.error = None
        try:
            return await request
        except ApiError as e:
            dashboard_logger.warning(f"{failure_message}: {e}")
            self.state.error = e.message
            self.state.notify("error", e.message or failure_message)
            return None
        finally:
            self.state.loading = False

    def _persist(self):
        self.state.save(self.state_path)

    def _replace_video(self, video):
        if any(v.id == video.id for v in self.state.videos):
            self.state.videos = [
                video if v.id == video.id else v for v in self.state.videos
            ]
        else:
            self.state.videos = [video] + self.state.videos

    # Session

    async def sign_in(self, credential: str) -> bool:
        auth = await self._call("Sign-in failed", self.client.sign_in(credential))
        if auth is None:
            return False

        self.state.user = auth.user
        self.state.notify("success", f"Signed in as {auth.user.email}")
        await self.load_videos()
        self._persist()
        return True

    async def sign_out(self):
        await self._call("Sign-out failed", self.client.logout())
        self.state = DashboardState()
        self._persist()

    # Videos

    async def load_videos(self) -> bool:
        videos = await self._call("Failed to load videos", self.client.list_videos())
        if videos is None:
            return False

        self.state.videos = videos
        if self.state.selected_video is None:
            self.state.clear_selection()
        self._persist()
        return True

    async def select_video(self, video_id: int) -> bool:
        """Open a video's detail pane and load its comments and notes."""
        envelope = await self._call("Failed to load video", self.client.get_video(video_id))
        if envelope is None:
            return False

        self.state.clear_selection()
        self.state.selected_video_id = video_id
        self._replace_video(envelope.video)
        if envelope.warning:
            self.state.notify("warning", envelope.warning)

        await self.load_comments()
        await self.load_notes()
        self._persist()
        return True

    async def sync_video(self, external_video_id: str) -> bool:
        external_video_id = external_video_id.strip()
        if not external_video_id:
            self.state.notify("error", "Video ID is required")
            return False

        video = await self._call(
            "Failed to sync video", self.client.sync_video(external_video_id)
        )
        if video is None:
            return False

        # Newest first, matching the server's ordering
        self.state.videos = [video] + self.state.videos
        self.state.notify("success", "Video synced successfully")
        self._persist()
        return True

    async def save_video(self, video_id: int, **fields: Any) -> bool:
        """Save a title/description edit, then reload the video list from the server."""
        video = await self._call(
            "Failed to update video", self.client.update_video(video_id, **fields)
        )
        if video is None:
            return False

        self.state.editing_video = False
        self.state.notify("success", "Video updated successfully")

        # Re-selecting would refresh from YouTube and overwrite the local edit
        await self.load_videos()
        return True

    async def remove_video(self, video_id: int) -> bool:
        message = await self._call(
            "Failed to remove video", self.client.delete_video(video_id)
        )
        if message is None:
            return False

        self.state.videos = [v for v in self.state.videos if v.id != video_id]
        if self.state.selected_video_id == video_id:
            self.state.clear_selection()
        self.state.confirming_deletion = False
        self.state.notify("success", message)
        self._persist()
        return True

    # Comments

    async def load_comments(self) -> bool:
        video_id = self.state.selected_video_id
        if video_id is None:
            return False

        comments = await self._call(
            "Failed to load comments", self.client.list_comments(video_id)
        )
        if comments is None:
            return False

        self.state.comments = comments
        return True

    async def add_comment(self, text: str, publish: bool = False) -> bool:
        video_id = self.state.selected_video_id
        if video_id is None:
            return False
        if not text.strip():
            self.state.notify("error", "Comment cannot be empty")
            return False

        comment = await self._call(
            "Failed to add comment",
            self.client.add_comment(video_id, text.strip(), publish=publish),
        )
        if comment is None:
            return False

        self.state.comments = [comment] + self.state.comments
        self.state.notify("success", "Comment added successfully")
        return True

    async def reply(self, comment_id: str, text: str) -> bool:
        if not text.strip():
            self.state.notify("error", "Reply cannot be empty")
            return False

        reply = await self._call(
            "Failed to add reply", self.client.reply_to_comment(comment_id, text.strip())
        )
        if reply is None:
            return False

        self.state.comments = self.state.comments + [reply]
        self.state.replying_to = None
        self.state.notify("success", "Reply added successfully")
        return True

    async def remove_comment(self, comment_id: str) -> bool:
        message = await self._call(
            "Failed to delete comment", self.client.delete_comment(comment_id)
        )
        if message is None:
            return False

        # Stored replies are deleted with their parent
        self.state.comments = [
            c
            for c in self.state.comments
            if c.youtube_comment_id != comment_id and c.parent_comment_id != comment_id
        ]
        self.state.confirming_deletion = False
        self.state.notify("success", message)
        return True

    # Notes

    async def load_notes(self) -> bool:
        video_id = self.state.selected_video_id
        if video_id is None:
            return False

        filters = self.state.note_filters
        notes = await self._call(
            "Failed to load notes",
            self.client.list_notes(video_id, q=filters.query, category=filters.category),
        )
        if notes is None:
            return False

        self.state.notes = notes
        return True

    async def add_note(
        self,
        title: str,
        content: str,
        category: str | None = None,
        priority: int = 1,
    ) -> bool:
        video_id = self.state.selected_video_id
        if video_id is None:
            return False
        if not title.strip() or not content.strip():
            self.state.notify("error", "Title and content are required")
            return False

        note = await self._call(
            "Failed to create note",
            self.client.create_note(
                video_id, title.strip(), content.strip(), category=category, priority=priority
            ),
        )
        if note is None:
            return False

        self.state.notes = [note] + self.state.notes
        self.state.adding_note = False
        self.state.notify("success", "Note created successfully")
        return True

    async def edit_note(self, note_id: int, **fields: Any) -> bool:
        note = await self._call(
            "Failed to update note", self.client.update_note(note_id, **fields)
        )
        if note is None:
            return False

        self.state.notes = [note if n.id == note_id else n for n in self.state.notes]
        self.state.editing_note_id = None
        self.state.notify("success", "Note updated successfully")
        return True

    async def toggle_note(self, note_id: int) -> bool:
        current = next((n for n in self.state.notes if n.id == note_id), None)
        if current is None:
            return False
        return await self.edit_note(note_id, is_completed=not current.is_completed)

    async def remove_note(self, note_id: int) -> bool:
        message = await self._call(
            "Failed to delete note", self.client.delete_note(note_id)
        )
        if message is None:
            return False

        self.state.notes = [n for n in self.state.notes if n.id != note_id]
        self.state.confirming_deletion = False
        self.state.notify("success", message)
        return True

    async def search_notes(self, q: str, video_id: int | None = None) -> bool:
        if not q.strip():
            self.state.search_results = []
            return False

        results = await self._call(
            "Search failed", self.client.search_notes(q.strip(), video_id=video_id)
        )
        if results is None:
            return False

        self.state.search_results = results
        return True
