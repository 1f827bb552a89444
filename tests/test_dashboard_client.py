"""Tests for DashboardClient request building, refresh and error handling."""

import json

import httpx
import pytest

from channeldesk.dashboard.client import ApiError, DashboardClient

USER = {
    "id": 3,
    "email": "creator@example.com",
    "name": "Creator",
    "hasYoutubeAccess": True,
    "createdAt": "2024-03-01T12:00:00",
}

NOTE = {
    "id": 11,
    "videoId": 7,
    "userId": 3,
    "title": "Fix thumbnail",
    "content": "Too dark",
    "category": None,
    "priority": 4,
    "isCompleted": True,
    "createdAt": "2024-03-01T12:00:00",
    "updatedAt": "2024-03-02T12:00:00",
}


def make_client(handler, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DashboardClient(base_url="http://api.test/api", http_client=http, **kwargs)


@pytest.mark.asyncio
async def test_sign_in_keeps_tokens():
    def handler(request):
        assert request.url.path == "/api/auth/external"
        assert json.loads(request.content) == {"credential": "ya29.google"}
        return httpx.Response(
            200,
            json={
                "success": True,
                "user": USER,
                "accessToken": "access-1",
                "refreshToken": "refresh-1",
            },
        )

    async with make_client(handler) as client:
        auth = await client.sign_in("ya29.google")

    assert auth.user.email == "creator@example.com"
    assert client.access_token == "access-1"
    assert client.refresh_token == "refresh-1"


@pytest.mark.asyncio
async def test_bearer_header_sent():
    seen = []

    def handler(request):
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"success": True, "user": USER})

    async with make_client(handler, access_token="access-1") as client:
        await client.me()

    assert seen == ["Bearer access-1"]


@pytest.mark.asyncio
async def test_expired_access_token_is_refreshed_once():
    calls = []

    def handler(request):
        calls.append((request.url.path, request.headers.get("Authorization")))
        if request.url.path == "/api/auth/refresh":
            assert json.loads(request.content) == {"refreshToken": "refresh-1"}
            return httpx.Response(200, json={"success": True, "accessToken": "access-2"})
        if request.headers["Authorization"] == "Bearer access-1":
            return httpx.Response(
                403, json={"success": False, "error": "Forbidden", "message": "Invalid token"}
            )
        return httpx.Response(200, json={"success": True, "videos": [], "totalCount": 0})

    async with make_client(handler, access_token="access-1", refresh_token="refresh-1") as client:
        videos = await client.list_videos()

    assert videos == []
    assert client.access_token == "access-2"
    assert calls == [
        ("/api/videos", "Bearer access-1"),
        ("/api/auth/refresh", "Bearer access-1"),
        ("/api/videos", "Bearer access-2"),
    ]


@pytest.mark.asyncio
async def test_wrong_token_type_is_not_refreshed():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(
            403,
            json={"success": False, "error": "Forbidden", "message": "Invalid token type"},
        )

    async with make_client(handler, access_token="refresh-as-access", refresh_token="r") as client:
        with pytest.raises(ApiError) as exc:
            await client.list_videos()

    assert exc.value.status_code == 403
    assert calls == ["/api/videos"]


@pytest.mark.asyncio
async def test_failed_refresh_raises():
    def handler(request):
        if request.url.path == "/api/auth/refresh":
            return httpx.Response(
                403, json={"success": False, "error": "Forbidden", "message": "Invalid token"}
            )
        return httpx.Response(
            401, json={"success": False, "error": "Access denied", "message": "expired"}
        )

    async with make_client(handler, access_token="a", refresh_token="r") as client:
        with pytest.raises(ApiError) as exc_info:
            await client.list_videos()

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Invalid token"


@pytest.mark.asyncio
async def test_error_envelope_is_parsed():
    def handler(request):
        return httpx.Response(
            409,
            json={
                "success": False,
                "error": "Conflict",
                "message": "Video already exists in dashboard",
            },
        )

    async with make_client(handler, access_token="a") as client:
        with pytest.raises(ApiError) as exc_info:
            await client.sync_video("dup")

    assert exc_info.value.status_code == 409
    assert exc_info.value.error == "Conflict"


@pytest.mark.asyncio
async def test_non_json_error():
    def handler(request):
        return httpx.Response(502, text="Bad gateway")

    async with make_client(handler, access_token="a") as client:
        with pytest.raises(ApiError) as exc_info:
            await client.list_videos()

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Request failed"


@pytest.mark.asyncio
async def test_transport_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with make_client(handler, access_token="a") as client:
        with pytest.raises(ApiError) as exc_info:
            await client.list_videos()

    assert exc_info.value.status_code == 0


@pytest.mark.asyncio
async def test_update_note_sends_camel_case_partial_body():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True, "note": NOTE})

    async with make_client(handler, access_token="a") as client:
        note = await client.update_note(11, is_completed=True)

    assert bodies == [{"isCompleted": True}]
    assert note.is_completed is True


@pytest.mark.asyncio
async def test_list_notes_omits_empty_filters():
    urls = []

    def handler(request):
        urls.append(request.url)
        return httpx.Response(200, json={"success": True, "notes": [], "totalCount": 0})

    async with make_client(handler, access_token="a") as client:
        await client.list_notes(7, q="", category="SEO")

    assert urls[0].path == "/api/notes/video/7"
    assert dict(urls[0].params) == {"category": "SEO"}
