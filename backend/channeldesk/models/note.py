from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Text,
    ForeignKey,
    Boolean,
    Index,
)
from sqlalchemy.orm import relationship

from channeldesk.database import Base

# Fixed label set for note categories
NOTE_CATEGORIES = (
    "Content",
    "SEO",
    "Thumbnail",
    "Title",
    "Description",
    "Tags",
    "Engagement",
    "Technical",
    "Ideas",
    "Other",
)

PRIORITY_LABELS = {
    1: "Low",
    2: "Medium",
    3: "High",
    4: "Urgent",
    5: "Critical",
}


class Note(Base):
    """Personal organizational note attached to a video."""

    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    video_id = Column(
        Integer, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(100), nullable=True)
    priority = Column(Integer, default=1, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    video = relationship("Video", back_populates="notes")
    user = relationship("User", back_populates="notes")

    __table_args__ = (
        Index("idx_note_user_video", "user_id", "video_id"),
        Index("idx_note_user_category", "user_id", "category"),
    )
