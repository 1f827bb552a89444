from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship

from channeldesk.database import Base


class Video(Base):
    """Video model mirroring metadata of one of the user's YouTube uploads."""

    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # YouTube video details
    youtube_video_id = Column(String(20), unique=True, nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String(512), nullable=True)

    # Video statistics
    view_count = Column(Integer, default=0, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)
    comment_count = Column(Integer, default=0, nullable=False)
    published_at = Column(DateTime, nullable=True)

    # Raw payload from the last YouTube fetch
    youtube_metadata = Column(JSON, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    user = relationship("User", back_populates="videos")
    comments = relationship(
        "Comment", back_populates="video", cascade="all, delete-orphan", passive_deletes=True
    )
    notes = relationship(
        "Note", back_populates="video", cascade="all, delete-orphan", passive_deletes=True
    )
