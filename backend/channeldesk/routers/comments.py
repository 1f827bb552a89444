"""Comments router for reading, writing and moderating video comments."""

from typing import Annotated
from fastapi import APIRouter, Depends, status

from channeldesk.dependencies import get_comment_store
from channeldesk.schemas.comment import (
    CommentCreate,
    CommentEnvelope,
    CommentImportEnvelope,
    CommentListEnvelope,
    CommentResponse,
    ReplyCreate,
    ReplyEnvelope,
)
from channeldesk.schemas.common import MessageResponse
from channeldesk.services.comment_service import CommentStore

router = APIRouter(prefix="/comments")


@router.get("/video/{video_id}", response_model=CommentListEnvelope)
async def list_comments(
    video_id: int,
    store: Annotated[CommentStore, Depends(get_comment_store)],
):
    """Get stored comments for a video, most recently published first."""
    comments = [CommentResponse.model_validate(c) for c in store.list(video_id)]
    return CommentListEnvelope(comments=comments, total_count=len(comments))


@router.post(
    "/video/{video_id}/import",
    response_model=CommentImportEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def import_comments(
    video_id: int,
    store: Annotated[CommentStore, Depends(get_comment_store)],
):
    """Pull comment threads for a video from YouTube into the dashboard."""
    imported = [CommentResponse.model_validate(c) for c in store.import_remote(video_id)]
    return CommentImportEnvelope(
        imported=len(imported),
        comments=imported,
        message=f"Imported {len(imported)} comments",
    )


@router.post("", response_model=CommentEnvelope, status_code=status.HTTP_201_CREATED)
async def add_comment(
    payload: CommentCreate,
    store: Annotated[CommentStore, Depends(get_comment_store)],
):
    """
    Add a top-level comment to a video.

    Stored locally unless publish is set, in which case it is posted to YouTube.
    """
    comment = store.create(payload)
    return CommentEnvelope(
        comment=CommentResponse.model_validate(comment),
        message="Comment added successfully",
    )


@router.get("/{comment_id}", response_model=CommentEnvelope)
async def get_comment(
    comment_id: str,
    store: Annotated[CommentStore, Depends(get_comment_store)],
):
    """Get a single comment by its YouTube comment ID."""
    return CommentEnvelope(comment=CommentResponse.model_validate(store.get(comment_id)))


@router.post(
    "/{comment_id}/reply",
    response_model=ReplyEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def reply_to_comment(
    comment_id: str,
    payload: ReplyCreate,
    store: Annotated[CommentStore, Depends(get_comment_store)],
):
    """Reply to a top-level comment on YouTube and store the reply."""
    reply = store.reply(comment_id, payload.text)
    return ReplyEnvelope(
        reply=CommentResponse.model_validate(reply),
        message="Reply added successfully",
    )


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: str,
    store: Annotated[CommentStore, Depends(get_comment_store)],
):
    """Delete a comment from the dashboard and, if it came from YouTube, from YouTube."""
    store.delete(comment_id)
    return MessageResponse(message="Comment deleted successfully")
