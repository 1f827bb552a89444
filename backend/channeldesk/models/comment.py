from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Text,
    ForeignKey,
    Boolean,
    JSON,
    Index,
)
from sqlalchemy.orm import relationship

from channeldesk.database import Base

# Prefix for comments that only exist in the local store
LOCAL_COMMENT_PREFIX = "local_"


class Comment(Base):
    """Comment on a video, either written locally or mirrored from YouTube."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    video_id = Column(
        Integer, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # YouTube comment details
    youtube_comment_id = Column(String(100), unique=True, nullable=False, index=True)
    author_name = Column(String(255), nullable=False)
    author_channel_url = Column(String(512), nullable=True)
    text_display = Column(Text, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)
    published_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)

    # Threading
    is_reply = Column(Boolean, default=False, nullable=False)
    parent_comment_id = Column(String(100), nullable=True)

    youtube_metadata = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    video = relationship("Video", back_populates="comments")

    __table_args__ = (Index("idx_video_published", "video_id", "published_at"),)

    @property
    def is_local(self) -> bool:
        return self.youtube_comment_id.startswith(LOCAL_COMMENT_PREFIX)
