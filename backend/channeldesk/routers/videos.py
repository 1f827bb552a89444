"""Videos router for managing synced YouTube videos."""

from typing import Annotated
from fastapi import APIRouter, Depends, Query, status

from channeldesk.dependencies import get_video_store
from channeldesk.schemas.common import MessageResponse
from channeldesk.schemas.video import (
    RemoteVideoListEnvelope,
    VideoEnvelope,
    VideoListEnvelope,
    VideoPatch,
    VideoSyncRequest,
)
from channeldesk.services.video_service import VideoStore

router = APIRouter(prefix="/videos")


@router.get("", response_model=VideoListEnvelope)
async def list_videos(store: Annotated[VideoStore, Depends(get_video_store)]):
    """Get all dashboard videos for the user, newest first, with comment and note counts."""
    videos = store.list_responses()
    return VideoListEnvelope(videos=videos, total_count=len(videos))


@router.get("/youtube", response_model=RemoteVideoListEnvelope)
async def list_channel_videos(
    store: Annotated[VideoStore, Depends(get_video_store)],
    max_results: int = Query(25, ge=1, le=50, alias="maxResults"),
):
    """
    List recent uploads on the user's YouTube channel.

    Each entry says whether it is already synced. Cached for a few minutes.
    """
    videos, cached = store.list_remote(max_results=max_results)
    return RemoteVideoListEnvelope(videos=videos, total_count=len(videos), cached=cached)


@router.post("/sync", response_model=VideoEnvelope, status_code=status.HTTP_201_CREATED)
async def sync_video(
    payload: VideoSyncRequest,
    store: Annotated[VideoStore, Depends(get_video_store)],
):
    """Add a YouTube video to the dashboard."""
    video = store.sync(payload.external_video_id)
    return VideoEnvelope(
        video=store.to_response(video), message="Video synced successfully"
    )


@router.get("/{video_id}", response_model=VideoEnvelope)
async def get_video(
    video_id: int,
    store: Annotated[VideoStore, Depends(get_video_store)],
):
    """
    Get a video, refreshed from YouTube.

    Falls back to the stored copy with a warning if YouTube cannot be reached.
    """
    video, warning = store.get_with_refresh(video_id)
    return VideoEnvelope(video=store.to_response(video), warning=warning)


@router.put("/{video_id}", response_model=VideoEnvelope)
async def update_video(
    video_id: int,
    patch: VideoPatch,
    store: Annotated[VideoStore, Depends(get_video_store)],
):
    """Edit the dashboard copy of a video's title or description (not pushed to YouTube)."""
    video = store.update(video_id, patch)
    return VideoEnvelope(
        video=store.to_response(video), message="Video updated successfully"
    )


@router.post("/{video_id}/publish", response_model=VideoEnvelope)
async def publish_video(
    video_id: int,
    store: Annotated[VideoStore, Depends(get_video_store)],
):
    """Push the dashboard title and description to YouTube."""
    video = store.publish(video_id)
    return VideoEnvelope(
        video=store.to_response(video), message="Video updated on YouTube"
    )


@router.delete("/{video_id}", response_model=MessageResponse)
async def delete_video(
    video_id: int,
    store: Annotated[VideoStore, Depends(get_video_store)],
):
    """Remove a video and its comments and notes from the dashboard."""
    store.delete(video_id)
    return MessageResponse(message="Video removed from dashboard")
