"""Ownership-gated store for comments on the caller's videos."""

import uuid
from datetime import datetime
from typing import Callable, List

from sqlalchemy.orm import Session

from channeldesk.context import AuthContext
from channeldesk.exceptions import NotFoundError, ValidationError
from channeldesk.logger import api_logger
from channeldesk.models.comment import Comment, LOCAL_COMMENT_PREFIX
from channeldesk.models.user import User
from channeldesk.models.video import Video
from channeldesk.schemas.comment import CommentCreate
from channeldesk.services.video_service import get_owned_video
from channeldesk.services.youtube_service import (
    YouTubeService,
    comment_fields_from_payload,
)


def new_local_comment_id() -> str:
    return f"{LOCAL_COMMENT_PREFIX}{uuid.uuid4().hex}"


class CommentStore:
    """Comments are owned transitively through the video they belong to."""

    def __init__(
        self,
        db: Session,
        context: AuthContext,
        youtube_factory: Callable[[User], YouTubeService] = YouTubeService,
    ):
        self.db = db
        self.context = context
        self.user = context.user
        self.youtube_factory = youtube_factory

    def _owned_comments(self):
        return (
            self.db.query(Comment)
            .join(Video, Comment.video_id == Video.id)
            .filter(Video.user_id == self.context.user_id)
        )

    def get(self, comment_id: str) -> Comment:
        """Load a comment by its YouTube comment ID."""
        comment = (
            self._owned_comments()
            .filter(Comment.youtube_comment_id == comment_id)
            .first()
        )

        if not comment:
            raise NotFoundError("Comment not found")

        return comment

    def list(self, video_id: int) -> List[Comment]:
        """Comments on one of the user's videos, most recently published first."""
        get_owned_video(self.db, self.context.user_id, video_id)

        return (
            self.db.query(Comment)
            .filter(Comment.video_id == video_id)
            .order_by(Comment.published_at.desc(), Comment.id.desc())
            .all()
        )

    def create(self, payload: CommentCreate) -> Comment:
        """
        Add a top-level comment.

        Without publish the comment only lives in the dashboard; with publish
        it is posted to YouTube and the returned thread is mirrored.
        """
        video = get_owned_video(self.db, self.context.user_id, payload.video_id)

        if payload.publish:
            response = self.youtube_factory(self.user).insert_comment(
                video.youtube_video_id, payload.text
            )
            comment = Comment(video_id=video.id, **comment_fields_from_payload(response))
        else:
            now = datetime.utcnow()
            comment = Comment(
                video_id=video.id,
                youtube_comment_id=new_local_comment_id(),
                author_name=self.user.name or "User",
                author_channel_url="",
                text_display=payload.text,
                like_count=0,
                published_at=now,
                updated_at=now,
                is_reply=False,
                youtube_metadata=None,
            )

        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def reply(self, comment_id: str, text: str) -> Comment:
        """Reply to a top-level comment through YouTube and store the reply."""
        parent = (
            self._owned_comments()
            .filter(
                Comment.youtube_comment_id == comment_id,
                Comment.is_reply.is_(False),
            )
            .first()
        )
        if not parent:
            raise NotFoundError("Comment not found")
        if parent.is_local:
            raise ValidationError("Local comments cannot be replied to on YouTube")

        response = self.youtube_factory(self.user).reply_to_comment(comment_id, text)

        fields = comment_fields_from_payload(response)
        fields["is_reply"] = True
        fields["parent_comment_id"] = comment_id

        reply = Comment(video_id=parent.video_id, **fields)
        self.db.add(reply)
        self.db.commit()
        self.db.refresh(reply)

        api_logger.info(f"User {self.context.user_id} replied to comment {comment_id}")
        return reply

    def delete(self, comment_id: str) -> None:
        """
        Delete a comment and its stored replies.

        Comments that were never on YouTube are removed locally; mirrored
        comments are deleted on YouTube first.
        """
        comment = self.get(comment_id)

        if not comment.is_local:
            self.youtube_factory(self.user).delete_comment(comment_id)

        if not comment.is_reply:
            self.db.query(Comment).filter(
                Comment.video_id == comment.video_id,
                Comment.parent_comment_id == comment_id,
            ).delete(synchronize_session=False)

        self.db.delete(comment)
        self.db.commit()

    def import_remote(self, video_id: int) -> List[Comment]:
        """
        Mirror YouTube comment threads for a video into the store.

        Comments already stored are left untouched.

        Returns:
            Newly imported comments
        """
        video = get_owned_video(self.db, self.context.user_id, video_id)
        threads = self.youtube_factory(self.user).list_comment_threads(
            video.youtube_video_id
        )

        payloads = []
        for thread in threads:
            top_level = thread.get("snippet", {}).get("topLevelComment")
            if top_level:
                payloads.append(top_level)
            payloads.extend(thread.get("replies", {}).get("comments", []))

        remote_ids = [item["id"] for item in payloads if item.get("id")]
        existing_ids = {
            youtube_comment_id
            for (youtube_comment_id,) in self.db.query(Comment.youtube_comment_id)
            .filter(Comment.youtube_comment_id.in_(remote_ids))
            .all()
        }

        imported = []
        for item in payloads:
            if not item.get("id") or item["id"] in existing_ids:
                continue
            comment = Comment(video_id=video.id, **comment_fields_from_payload(item))
            self.db.add(comment)
            existing_ids.add(item["id"])
            imported.append(comment)

        self.db.commit()
        for comment in imported:
            self.db.refresh(comment)

        api_logger.info(
            f"Imported {len(imported)} comments for video {video.id} (user {self.context.user_id})"
        )
        return imported
