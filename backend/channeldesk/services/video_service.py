"""Ownership-gated store for videos synced from YouTube."""

from typing import Callable, Dict, Iterable, List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from channeldesk.config import settings
from channeldesk.context import AuthContext
from channeldesk.exceptions import (
    ConflictError,
    ExternalAccessRequired,
    ExternalServiceError,
    NotFoundError,
)
from channeldesk.logger import api_logger
from channeldesk.models.comment import Comment
from channeldesk.models.note import Note
from channeldesk.models.user import User
from channeldesk.models.video import Video
from channeldesk.redis_client import RedisClient, redis_client
from channeldesk.schemas.video import (
    RemoteVideo,
    VideoCounts,
    VideoPatch,
    VideoResponse,
)
from channeldesk.services.youtube_service import (
    YouTubeService,
    parse_youtube_datetime,
    video_fields_from_payload,
)

CACHED_DATA_WARNING = "Using cached data - YouTube API unavailable"


def get_owned_video(db: Session, user_id: int, video_id: int) -> Video:
    """
    Load a video belonging to the user.

    Raises NotFoundError both when the video does not exist and when it is
    owned by someone else.
    """
    video = (
        db.query(Video)
        .filter(Video.id == video_id, Video.user_id == user_id)
        .first()
    )

    if not video:
        raise NotFoundError("Video not found")

    return video


def remote_videos_cache_key(user_id: int) -> str:
    return f"remote_videos:{user_id}"


class VideoStore:
    """CRUD over the caller's videos, with YouTube as the source of metadata."""

    def __init__(
        self,
        db: Session,
        context: AuthContext,
        youtube_factory: Callable[[User], YouTubeService] = YouTubeService,
        cache: RedisClient | None = None,
    ):
        self.db = db
        self.context = context
        self.user = context.user
        self.youtube_factory = youtube_factory
        self.cache = cache if cache is not None else redis_client

    def _youtube(self) -> YouTubeService:
        return self.youtube_factory(self.user)

    def get(self, video_id: int) -> Video:
        return get_owned_video(self.db, self.context.user_id, video_id)

    def list(self) -> List[Video]:
        """Videos owned by the user, newest first."""
        return (
            self.db.query(Video)
            .filter(Video.user_id == self.context.user_id)
            .order_by(Video.created_at.desc(), Video.id.desc())
            .all()
        )

    def counts(self, video_ids: Iterable[int]) -> Dict[int, VideoCounts]:
        """Comment and note counts per video, in two grouped queries."""
        ids = list(video_ids)
        if not ids:
            return {}

        comment_counts = dict(
            self.db.query(Comment.video_id, func.count(Comment.id))
            .filter(Comment.video_id.in_(ids))
            .group_by(Comment.video_id)
            .all()
        )
        note_counts = dict(
            self.db.query(Note.video_id, func.count(Note.id))
            .filter(Note.video_id.in_(ids), Note.user_id == self.context.user_id)
            .group_by(Note.video_id)
            .all()
        )

        return {
            video_id: VideoCounts(
                comments=comment_counts.get(video_id, 0),
                notes=note_counts.get(video_id, 0),
            )
            for video_id in ids
        }

    def to_response(self, video: Video) -> VideoResponse:
        response = VideoResponse.model_validate(video)
        response.counts = self.counts([video.id])[video.id]
        return response

    def list_responses(self) -> List[VideoResponse]:
        videos = self.list()
        counts = self.counts(video.id for video in videos)

        responses = []
        for video in videos:
            response = VideoResponse.model_validate(video)
            response.counts = counts[video.id]
            responses.append(response)

        return responses

    def get_with_refresh(self, video_id: int) -> tuple[Video, str | None]:
        """
        Load a video and refresh its metadata from YouTube.

        A failed refresh is not fatal: the stored row is returned together
        with a warning.

        Returns:
            Tuple of (video, warning or None)
        """
        video = self.get(video_id)

        try:
            payload = self._youtube().get_video_details(video.youtube_video_id)
        except (ExternalServiceError, ExternalAccessRequired, NotFoundError) as e:
            api_logger.warning(
                f"Serving cached video {video.id} for user {self.context.user_id}: {e.message}"
            )
            return video, CACHED_DATA_WARNING

        for field, value in video_fields_from_payload(payload).items():
            if field == "published_at" and value is None:
                continue
            setattr(video, field, value)

        self.db.commit()
        self.db.refresh(video)
        return video, None

    def sync(self, external_video_id: str) -> Video:
        """
        Import a YouTube video into the dashboard for the first time.

        Raises:
            ConflictError: The YouTube video is already in the store
            NotFoundError: YouTube does not know the video
        """
        existing = (
            self.db.query(Video)
            .filter(Video.youtube_video_id == external_video_id)
            .first()
        )
        if existing:
            raise ConflictError("Video already exists in dashboard")

        payload = self._youtube().get_video_details(external_video_id)

        video = Video(
            user_id=self.context.user_id,
            youtube_video_id=external_video_id,
            **video_fields_from_payload(payload),
        )
        self.db.add(video)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Video already exists in dashboard")

        self.db.refresh(video)
        self.cache.delete(remote_videos_cache_key(self.context.user_id))
        api_logger.info(f"User {self.context.user_id} synced video {external_video_id}")
        return video

    def update(self, video_id: int, patch: VideoPatch) -> Video:
        """Apply a local-only title/description edit."""
        video = self.get(video_id)

        for field, value in patch.model_dump(exclude_unset=True).items():
            setattr(video, field, value)

        self.db.commit()
        self.db.refresh(video)
        return video

    def publish(self, video_id: int) -> Video:
        """Push the locally stored title and description to YouTube."""
        video = self.get(video_id)

        payload = self._youtube().update_video(
            video.youtube_video_id,
            title=video.title,
            description=video.description,
        )
        video.youtube_metadata = {**(video.youtube_metadata or {}), **payload}

        self.db.commit()
        self.db.refresh(video)
        api_logger.info(f"User {self.context.user_id} published edits for video {video.id}")
        return video

    def delete(self, video_id: int) -> None:
        """Remove a video; its comments and notes go with it via ON DELETE CASCADE."""
        video = self.get(video_id)
        self.db.delete(video)
        self.db.commit()
        api_logger.info(f"User {self.context.user_id} removed video {video_id}")

    def list_remote(self, max_results: int = 50) -> tuple[List[RemoteVideo], bool]:
        """
        List the uploads on the user's channel, cached per user in Redis.

        Returns:
            Tuple of (videos, whether the listing came from cache)
        """
        cache_key = remote_videos_cache_key(self.context.user_id)
        cached = self.cache.get_json(cache_key)

        if cached is not None:
            items, from_cache = cached, True
        else:
            items = []
            for item in self._youtube().list_channel_videos(max_results=max_results):
                snippet = item.get("snippet", {})
                video_id = item.get("id", {}).get("videoId")
                if not video_id:
                    continue
                items.append(
                    {
                        "youtube_video_id": video_id,
                        "title": snippet.get("title", ""),
                        "description": snippet.get("description"),
                        "thumbnail_url": snippet.get("thumbnails", {})
                        .get("high", {})
                        .get("url"),
                        "published_at": snippet.get("publishedAt"),
                    }
                )
            self.cache.set_json(
                cache_key, items, expire=settings.remote_videos_cache_seconds
            )
            from_cache = False

        synced_ids = {
            youtube_video_id
            for (youtube_video_id,) in self.db.query(Video.youtube_video_id)
            .filter(Video.user_id == self.context.user_id)
            .all()
        }

        videos = [
            RemoteVideo(
                youtube_video_id=item["youtube_video_id"],
                title=item["title"],
                description=item.get("description"),
                thumbnail_url=item.get("thumbnail_url"),
                published_at=parse_youtube_datetime(item.get("published_at")),
                is_synced=item["youtube_video_id"] in synced_ids,
            )
            for item in items
        ]
        return videos, from_cache
