"""Ownership-gated store for personal notes. Notes never leave the local database."""

from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from channeldesk.context import AuthContext
from channeldesk.exceptions import NotFoundError, ValidationError
from channeldesk.models.note import Note, NOTE_CATEGORIES
from channeldesk.schemas.note import NoteCreate, NotePatch
from channeldesk.services.video_service import get_owned_video

# Incomplete first, then most urgent, then newest
NOTE_ORDERING = (
    Note.is_completed.asc(),
    Note.priority.desc(),
    Note.created_at.desc(),
    Note.id.desc(),
)


def _matches_text(query: str):
    # % and _ in the query are literal characters
    return or_(
        Note.title.icontains(query, autoescape=True),
        Note.content.icontains(query, autoescape=True),
    )


class NoteStore:
    """CRUD and search over the caller's notes."""

    def __init__(self, db: Session, context: AuthContext):
        self.db = db
        self.context = context
        self.user = context.user

    def get(self, note_id: int) -> Note:
        note = (
            self.db.query(Note)
            .filter(Note.id == note_id, Note.user_id == self.context.user_id)
            .first()
        )

        if not note:
            raise NotFoundError("Note not found")

        return note

    def list(
        self,
        video_id: int,
        q: str | None = None,
        category: str | None = None,
    ) -> List[Note]:
        """
        Notes on one of the user's videos.

        Args:
            video_id: Local video ID
            q: Optional case-insensitive substring matched against title and content
            category: Optional exact category match
        """
        get_owned_video(self.db, self.context.user_id, video_id)

        query = self.db.query(Note).filter(
            Note.video_id == video_id, Note.user_id == self.context.user_id
        )

        if q:
            query = query.filter(_matches_text(q))

        if category:
            query = query.filter(Note.category == category)

        return query.order_by(*NOTE_ORDERING).all()

    def create(self, payload: NoteCreate) -> Note:
        video = get_owned_video(self.db, self.context.user_id, payload.video_id)

        note = Note(
            video_id=video.id,
            user_id=self.context.user_id,
            title=payload.title,
            content=payload.content,
            category=payload.category,
            priority=payload.priority,
            is_completed=False,
        )
        self.db.add(note)
        self.db.commit()
        self.db.refresh(note)
        return note

    def update(self, note_id: int, patch: NotePatch) -> Note:
        """Apply only the fields present in the patch."""
        note = self.get(note_id)

        for field, value in patch.model_dump(exclude_unset=True).items():
            setattr(note, field, value)

        self.db.commit()
        self.db.refresh(note)
        return note

    def delete(self, note_id: int) -> None:
        note = self.get(note_id)
        self.db.delete(note)
        self.db.commit()

    def search(self, q: str, video_id: int | None = None) -> List[Note]:
        """Search all of the user's notes, optionally within one video."""
        if not q or not q.strip():
            raise ValidationError("Search query is required")

        query = (
            self.db.query(Note)
            .options(joinedload(Note.video))
            .filter(Note.user_id == self.context.user_id)
            .filter(_matches_text(q.strip()))
        )

        if video_id is not None:
            query = query.filter(Note.video_id == video_id)

        return query.order_by(*NOTE_ORDERING).all()

    def by_category(self, category: str) -> List[Note]:
        """All of the user's notes in a category, across videos."""
        if category not in NOTE_CATEGORIES:
            raise ValidationError(
                f"Category must be one of: {', '.join(NOTE_CATEGORIES)}"
            )

        return (
            self.db.query(Note)
            .options(joinedload(Note.video))
            .filter(Note.user_id == self.context.user_id, Note.category == category)
            .order_by(*NOTE_ORDERING)
            .all()
        )
