"""Async HTTP client for the Channel Desk API, used by the dashboard."""

from typing import Any, Dict, List

import httpx
from pydantic.alias_generators import to_camel

from channeldesk.config import settings
from channeldesk.logger import dashboard_logger
from channeldesk.schemas.auth import AuthResponse
from channeldesk.schemas.comment import CommentImportEnvelope, CommentResponse
from channeldesk.schemas.note import (
    NoteCategoriesResponse,
    NoteResponse,
    NoteWithVideo,
)
from channeldesk.schemas.user import UserResponse
from channeldesk.schemas.video import (
    RemoteVideoListEnvelope,
    VideoEnvelope,
    VideoResponse,
)

# Server message for a bad or expired access token (403)
REJECTED_TOKEN_MESSAGE = "Invalid token"


class ApiError(Exception):
    """Error envelope returned by the API (or a transport failure, with status 0)."""

    def __init__(self, status_code: int, error: str, message: str):
        self.status_code = status_code
        self.error = error
        self.message = message
        super().__init__(f"{status_code} {error}: {message}")


def _camel_body(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {to_camel(key): value for key, value in fields.items()}


def _token_rejected(response: httpx.Response) -> bool:
    """True for a missing/expired bearer token, not for a wrong token type."""
    if response.status_code == 401:
        return True
    if response.status_code != 403:
        return False
    try:
        body = response.json()
    except ValueError:
        return False
    return isinstance(body, dict) and body.get("message") == REJECTED_TOKEN_MESSAGE


class DashboardClient:
    """
    Thin wrapper over the REST endpoints.

    Holds the local token pair; an expired access token is refreshed once
    per request and the request retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (base_url or settings.dashboard_api_url).rstrip("/")
        self.access_token = access_token
        self.refresh_token = refresh_token
        self._http = http_client or httpx.AsyncClient(timeout=30.0)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    def _headers(self) -> Dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _send(
        self, method: str, path: str, json: Any = None, params: Any = None
    ) -> httpx.Response:
        try:
            return await self._http.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                params=params,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            dashboard_logger.error(f"{method} {path} failed: {e}")
            raise ApiError(0, "Network Error", "Could not reach the server")

    @staticmethod
    def _raise_for_envelope(response: httpx.Response):
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        raise ApiError(
            response.status_code,
            body.get("error") or response.reason_phrase,
            body.get("message") or "Request failed",
        )

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Dict[str, Any] | None = None,
        retry_on_expiry: bool = True,
    ) -> Dict[str, Any]:
        """
        Send a request and return the decoded success envelope.

        Raises:
            ApiError: Non-2xx response or transport failure
        """
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        response = await self._send(method, path, json=json, params=params)

        if (
            _token_rejected(response)
            and retry_on_expiry
            and self.refresh_token
            and self.access_token
        ):
            dashboard_logger.info("Access token rejected, refreshing")
            await self.refresh()
            response = await self._send(method, path, json=json, params=params)

        if response.is_error:
            self._raise_for_envelope(response)

        return response.json()

    # Authentication

    async def sign_in(self, credential: str) -> AuthResponse:
        """Exchange a Google credential for local tokens and keep them."""
        data = await self._request(
            "POST", "/auth/external", json={"credential": credential}, retry_on_expiry=False
        )
        auth = AuthResponse.model_validate(data)
        self.access_token = auth.access_token
        self.refresh_token = auth.refresh_token
        return auth

    async def refresh(self) -> str:
        data = await self._request(
            "POST",
            "/auth/refresh",
            json={"refreshToken": self.refresh_token},
            retry_on_expiry=False,
        )
        self.access_token = data["accessToken"]
        return self.access_token

    async def me(self) -> UserResponse:
        data = await self._request("GET", "/auth/me")
        return UserResponse.model_validate(data["user"])

    async def store_youtube_token(
        self, access_token: str, refresh_token: str | None = None
    ) -> str:
        data = await self._request(
            "POST",
            "/auth/youtube-token",
            json={"accessToken": access_token, "refreshToken": refresh_token},
        )
        return data["message"]

    async def logout(self) -> str:
        data = await self._request("POST", "/auth/logout")
        self.access_token = None
        self.refresh_token = None
        return data["message"]

    # Videos

    async def list_videos(self) -> List[VideoResponse]:
        data = await self._request("GET", "/videos")
        return [VideoResponse.model_validate(v) for v in data["videos"]]

    async def list_channel_videos(self, max_results: int = 25) -> RemoteVideoListEnvelope:
        data = await self._request(
            "GET", "/videos/youtube", params={"maxResults": max_results}
        )
        return RemoteVideoListEnvelope.model_validate(data)

    async def get_video(self, video_id: int) -> VideoEnvelope:
        data = await self._request("GET", f"/videos/{video_id}")
        return VideoEnvelope.model_validate(data)

    async def sync_video(self, external_video_id: str) -> VideoResponse:
        data = await self._request(
            "POST", "/videos/sync", json={"externalVideoId": external_video_id}
        )
        return VideoResponse.model_validate(data["video"])

    async def update_video(self, video_id: int, **fields: Any) -> VideoResponse:
        """Send only the given fields (title and/or description)."""
        data = await self._request(
            "PUT", f"/videos/{video_id}", json=_camel_body(fields)
        )
        return VideoResponse.model_validate(data["video"])

    async def publish_video(self, video_id: int) -> VideoResponse:
        data = await self._request("POST", f"/videos/{video_id}/publish")
        return VideoResponse.model_validate(data["video"])

    async def delete_video(self, video_id: int) -> str:
        data = await self._request("DELETE", f"/videos/{video_id}")
        return data["message"]

    # Comments

    async def list_comments(self, video_id: int) -> List[CommentResponse]:
        data = await self._request("GET", f"/comments/video/{video_id}")
        return [CommentResponse.model_validate(c) for c in data["comments"]]

    async def import_comments(self, video_id: int) -> CommentImportEnvelope:
        data = await self._request("POST", f"/comments/video/{video_id}/import")
        return CommentImportEnvelope.model_validate(data)

    async def add_comment(
        self, video_id: int, text: str, publish: bool = False
    ) -> CommentResponse:
        data = await self._request(
            "POST",
            "/comments",
            json={"videoId": video_id, "text": text, "publish": publish},
        )
        return CommentResponse.model_validate(data["comment"])

    async def get_comment(self, comment_id: str) -> CommentResponse:
        data = await self._request("GET", f"/comments/{comment_id}")
        return CommentResponse.model_validate(data["comment"])

    async def reply_to_comment(self, comment_id: str, text: str) -> CommentResponse:
        data = await self._request(
            "POST", f"/comments/{comment_id}/reply", json={"text": text}
        )
        return CommentResponse.model_validate(data["reply"])

    async def delete_comment(self, comment_id: str) -> str:
        data = await self._request("DELETE", f"/comments/{comment_id}")
        return data["message"]

    # Notes

    async def note_categories(self) -> NoteCategoriesResponse:
        data = await self._request("GET", "/notes/categories")
        return NoteCategoriesResponse.model_validate(data)

    async def list_notes(
        self, video_id: int, q: str | None = None, category: str | None = None
    ) -> List[NoteResponse]:
        data = await self._request(
            "GET",
            f"/notes/video/{video_id}",
            params={"q": q or None, "category": category},
        )
        return [NoteResponse.model_validate(n) for n in data["notes"]]

    async def search_notes(
        self, q: str, video_id: int | None = None
    ) -> List[NoteWithVideo]:
        data = await self._request(
            "GET", "/notes/search", params={"q": q, "videoId": video_id}
        )
        return [NoteWithVideo.model_validate(n) for n in data["notes"]]

    async def notes_by_category(self, category: str) -> List[NoteWithVideo]:
        data = await self._request("GET", f"/notes/category/{category}")
        return [NoteWithVideo.model_validate(n) for n in data["notes"]]

    async def create_note(
        self,
        video_id: int,
        title: str,
        content: str,
        category: str | None = None,
        priority: int = 1,
    ) -> NoteResponse:
        data = await self._request(
            "POST",
            "/notes",
            json={
                "videoId": video_id,
                "title": title,
                "content": content,
                "category": category,
                "priority": priority,
            },
        )
        return NoteResponse.model_validate(data["note"])

    async def get_note(self, note_id: int) -> NoteResponse:
        data = await self._request("GET", f"/notes/{note_id}")
        return NoteResponse.model_validate(data["note"])

    async def update_note(self, note_id: int, **fields: Any) -> NoteResponse:
        """Partially update a note; keys are snake_case field names."""
        data = await self._request("PUT", f"/notes/{note_id}", json=_camel_body(fields))
        return NoteResponse.model_validate(data["note"])

    async def delete_note(self, note_id: int) -> str:
        data = await self._request("DELETE", f"/notes/{note_id}")
        return data["message"]
