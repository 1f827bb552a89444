from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship

from channeldesk.database import Base


class User(Base):
    """User model for storing Google account and YouTube credentials."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    google_id = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    picture_url = Column(String(512), nullable=True)

    # External OAuth credential used to call YouTube on the user's behalf
    access_token = Column(Text, nullable=True)
    refresh_token = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    videos = relationship(
        "Video", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    notes = relationship(
        "Note", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def has_youtube_access(self) -> bool:
        return bool(self.access_token)
