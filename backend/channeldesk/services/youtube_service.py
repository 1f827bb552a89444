"""YouTube API service for video metadata and comment management."""

from datetime import datetime, timezone
from typing import List, Dict, Any

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from channeldesk.config import settings
from channeldesk.exceptions import (
    ExternalAccessRequired,
    ExternalServiceError,
    NotFoundError,
)
from channeldesk.logger import youtube_logger
from channeldesk.models.user import User


def parse_youtube_datetime(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp from the YouTube API into a naive UTC datetime."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def video_fields_from_payload(item: Dict[str, Any]) -> Dict[str, Any]:
    """Map a YouTube video resource onto Video column values."""
    snippet = item.get("snippet", {})
    statistics = item.get("statistics", {})
    thumbnails = snippet.get("thumbnails", {})

    return {
        "title": snippet.get("title", ""),
        "description": snippet.get("description"),
        "thumbnail_url": (thumbnails.get("high") or thumbnails.get("default") or {}).get(
            "url"
        ),
        "view_count": int(statistics.get("viewCount", 0)),
        "like_count": int(statistics.get("likeCount", 0)),
        "comment_count": int(statistics.get("commentCount", 0)),
        "published_at": parse_youtube_datetime(snippet.get("publishedAt")),
        "youtube_metadata": item,
    }


def comment_fields_from_payload(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a YouTube comment (or comment thread) resource onto Comment column values.

    Comment threads wrap their top-level comment in snippet.topLevelComment.
    """
    if "topLevelComment" in item.get("snippet", {}):
        item = item["snippet"]["topLevelComment"]

    snippet = item.get("snippet", {})
    parent_id = snippet.get("parentId")

    return {
        "youtube_comment_id": item["id"],
        "author_name": snippet.get("authorDisplayName") or "Unknown",
        "author_channel_url": snippet.get("authorChannelUrl"),
        "text_display": snippet.get("textDisplay") or snippet.get("textOriginal", ""),
        "like_count": int(snippet.get("likeCount", 0)),
        "published_at": parse_youtube_datetime(snippet.get("publishedAt")),
        "updated_at": parse_youtube_datetime(snippet.get("updatedAt")),
        "is_reply": parent_id is not None,
        "parent_comment_id": parent_id,
        "youtube_metadata": item,
    }


class YouTubeService:
    """Service for interacting with YouTube Data API v3 on behalf of a user."""

    def __init__(self, user: User):
        """Initialize YouTube service with user credentials."""
        self.user = user
        self.youtube = None
        self._initialize_client()

    def _initialize_client(self):
        """Initialize YouTube API client with user's OAuth credentials."""
        if not self.user.access_token:
            raise ExternalAccessRequired()

        # Create credentials object
        creds = Credentials(
            token=self.user.access_token,
            refresh_token=self.user.refresh_token,
            token_uri=settings.google_token_uri,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret or None,
            scopes=settings.youtube_scopes,
        )

        # Check if token is expired and refresh if needed
        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except GoogleAuthError as e:
                youtube_logger.error(f"Failed to refresh YouTube credentials: {e}")
                raise ExternalServiceError("YouTube credentials could not be refreshed")
            # Persisting the new token is left to the caller's session
            self.user.access_token = creds.token

        self.youtube = build("youtube", "v3", credentials=creds, cache_discovery=False)

    def _execute(self, request, action: str) -> Any:
        """Run a prepared API request, translating failures into ExternalServiceError."""
        try:
            return request.execute()
        except HttpError as e:
            youtube_logger.error(f"YouTube API error while trying to {action}: {e}")
            raise ExternalServiceError(f"YouTube API failed to {action}")
        except (GoogleAuthError, OSError) as e:
            youtube_logger.error(f"YouTube transport error while trying to {action}: {e}")
            raise ExternalServiceError(f"YouTube API failed to {action}")

    def get_video_details(self, video_id: str) -> Dict[str, Any]:
        """
        Fetch a single video's metadata.

        Args:
            video_id: YouTube video ID

        Returns:
            Video resource with snippet, statistics and status parts

        Raises:
            NotFoundError: YouTube does not know the video
            ExternalServiceError: YouTube API request failed
        """
        response = self._execute(
            self.youtube.videos().list(part="snippet,statistics,status", id=video_id),
            "fetch video details",
        )

        items = response.get("items", [])
        if not items:
            raise NotFoundError("Video not found on YouTube")

        return items[0]

    def insert_comment(self, video_id: str, text: str) -> Dict[str, Any]:
        """Post a new top-level comment thread on a video."""
        body = {
            "snippet": {
                "videoId": video_id,
                "topLevelComment": {"snippet": {"textOriginal": text}},
            }
        }
        response = self._execute(
            self.youtube.commentThreads().insert(part="snippet", body=body),
            "add comment",
        )
        youtube_logger.info(f"Posted comment on video {video_id}")
        return response

    def reply_to_comment(self, parent_comment_id: str, text: str) -> Dict[str, Any]:
        """Post a reply under an existing top-level comment."""
        body = {"snippet": {"parentId": parent_comment_id, "textOriginal": text}}
        response = self._execute(
            self.youtube.comments().insert(part="snippet", body=body),
            "reply to comment",
        )
        youtube_logger.info(f"Replied to comment {parent_comment_id}")
        return response

    def delete_comment(self, comment_id: str) -> None:
        """Delete a comment from YouTube."""
        self._execute(self.youtube.comments().delete(id=comment_id), "delete comment")
        youtube_logger.info(f"Deleted comment {comment_id}")

    def update_video(
        self, video_id: str, title: str | None = None, description: str | None = None
    ) -> Dict[str, Any]:
        """
        Update a video's title and/or description on YouTube.

        videos.update replaces the whole snippet, so the current snippet is
        fetched first and only the given fields are overridden.
        """
        current = self.get_video_details(video_id)
        snippet = dict(current.get("snippet", {}))
        if title is not None:
            snippet["title"] = title
        if description is not None:
            snippet["description"] = description

        # Read-only snippet fields are rejected by videos.update
        body_snippet = {
            key: snippet[key]
            for key in ("title", "description", "categoryId", "tags", "defaultLanguage")
            if key in snippet
        }

        response = self._execute(
            self.youtube.videos().update(
                part="snippet", body={"id": video_id, "snippet": body_snippet}
            ),
            "update video",
        )
        youtube_logger.info(f"Updated video {video_id} on YouTube")
        return response

    def list_channel_videos(self, max_results: int = 50) -> List[Dict[str, Any]]:
        """List the most recent videos uploaded by the authenticated user."""
        response = self._execute(
            self.youtube.search().list(
                part="snippet",
                forMine=True,
                type="video",
                maxResults=min(50, max_results),
                order="date",
            ),
            "list channel videos",
        )
        return response.get("items", [])

    def list_comment_threads(
        self, video_id: str, max_pages: int = 10
    ) -> List[Dict[str, Any]]:
        """
        Fetch comment threads (with inline replies) for a video.

        Args:
            video_id: YouTube video ID
            max_pages: Safety limit on pages of 100 threads

        Returns:
            List of commentThread resources
        """
        threads = []
        page_token = None

        for _ in range(max_pages):
            response = self._execute(
                self.youtube.commentThreads().list(
                    part="snippet,replies",
                    videoId=video_id,
                    maxResults=100,
                    order="time",
                    pageToken=page_token,
                ),
                "fetch comments",
            )
            threads.extend(response.get("items", []))

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        return threads
