"""Notes router for personal notes attached to videos."""

from typing import Annotated
from fastapi import APIRouter, Depends, Query, status

from channeldesk.dependencies import get_current_user, get_note_store
from channeldesk.models.note import NOTE_CATEGORIES, PRIORITY_LABELS
from channeldesk.models.user import User
from channeldesk.schemas.common import MessageResponse
from channeldesk.schemas.note import (
    NoteCategoriesResponse,
    NoteCreate,
    NoteEnvelope,
    NoteListEnvelope,
    NotePatch,
    NoteResponse,
    NoteSearchEnvelope,
    NoteWithVideo,
)
from channeldesk.services.note_service import NoteStore

router = APIRouter(prefix="/notes")


@router.get("/categories", response_model=NoteCategoriesResponse)
async def get_note_categories(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Available note categories and priority labels."""
    return NoteCategoriesResponse(
        categories=list(NOTE_CATEGORIES), priorities=PRIORITY_LABELS
    )


@router.get("/search", response_model=NoteSearchEnvelope)
async def search_notes(
    store: Annotated[NoteStore, Depends(get_note_store)],
    q: str = Query("", description="Text to find in note titles and content"),
    video_id: int | None = Query(None, alias="videoId"),
):
    """Search the user's notes, optionally within a single video."""
    notes = [NoteWithVideo.model_validate(n) for n in store.search(q, video_id=video_id)]
    return NoteSearchEnvelope(notes=notes, total_count=len(notes), search_query=q)


@router.get("/category/{category}", response_model=NoteSearchEnvelope)
async def get_notes_by_category(
    category: str,
    store: Annotated[NoteStore, Depends(get_note_store)],
):
    """Get the user's notes in one category across all videos."""
    notes = [NoteWithVideo.model_validate(n) for n in store.by_category(category)]
    return NoteSearchEnvelope(notes=notes, total_count=len(notes))


@router.get("/video/{video_id}", response_model=NoteListEnvelope)
async def list_notes(
    video_id: int,
    store: Annotated[NoteStore, Depends(get_note_store)],
    q: str | None = Query(None, description="Filter by title or content"),
    category: str | None = Query(None, description="Filter by category"),
):
    """Get notes for a video: open before done, then by priority, then newest."""
    notes = [
        NoteResponse.model_validate(n)
        for n in store.list(video_id, q=q, category=category)
    ]
    return NoteListEnvelope(notes=notes, total_count=len(notes))


@router.post("", response_model=NoteEnvelope, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    store: Annotated[NoteStore, Depends(get_note_store)],
):
    """Create a note on one of the user's videos."""
    note = store.create(payload)
    return NoteEnvelope(
        note=NoteResponse.model_validate(note), message="Note created successfully"
    )


@router.get("/{note_id}", response_model=NoteEnvelope)
async def get_note(
    note_id: int,
    store: Annotated[NoteStore, Depends(get_note_store)],
):
    """Get a single note."""
    return NoteEnvelope(note=NoteResponse.model_validate(store.get(note_id)))


@router.put("/{note_id}", response_model=NoteEnvelope)
async def update_note(
    note_id: int,
    patch: NotePatch,
    store: Annotated[NoteStore, Depends(get_note_store)],
):
    """Update some fields of a note."""
    note = store.update(note_id, patch)
    return NoteEnvelope(
        note=NoteResponse.model_validate(note), message="Note updated successfully"
    )


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(
    note_id: int,
    store: Annotated[NoteStore, Depends(get_note_store)],
):
    """Delete a note."""
    store.delete(note_id)
    return MessageResponse(message="Note deleted successfully")
