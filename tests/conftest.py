"""
Shared fixtures: in-memory SQLite, a fake YouTube adapter and a fake cache.

Settings are read at import time, so the environment is prepared before
anything from channeldesk is imported.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client.apps.googleusercontent.com")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:1/0")
os.environ.setdefault("ENVIRONMENT", "test")

import itertools
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from channeldesk.database import Base, get_db
from channeldesk.dependencies import get_youtube_factory
from channeldesk.exceptions import (
    ExternalAccessRequired,
    ExternalServiceError,
    NotFoundError,
)
from channeldesk.main import app
from channeldesk.models import User
from channeldesk.redis_client import get_redis
from channeldesk.services.auth_service import AuthService


def video_payload(video_id, title="Launch video", views=1500, likes=120, comments=8):
    return {
        "kind": "youtube#video",
        "id": video_id,
        "snippet": {
            "title": title,
            "description": f"Description of {title}",
            "publishedAt": "2024-03-04T21:15:00Z",
            "thumbnails": {"high": {"url": f"https://i.ytimg.com/vi/{video_id}/hq.jpg"}},
            "categoryId": "22",
        },
        "statistics": {
            "viewCount": str(views),
            "likeCount": str(likes),
            "commentCount": str(comments),
        },
    }


def comment_payload(comment_id, text, parent_id=None, published="2024-03-05T10:00:00Z"):
    snippet = {
        "authorDisplayName": "Viewer",
        "authorChannelUrl": "https://youtube.com/@viewer",
        "textDisplay": text,
        "textOriginal": text,
        "likeCount": 2,
        "publishedAt": published,
        "updatedAt": published,
    }
    if parent_id:
        snippet["parentId"] = parent_id
    return {"kind": "youtube#comment", "id": comment_id, "snippet": snippet}


class FakeYouTube:
    """In-memory stand-in for YouTubeService, usable as the adapter factory."""

    def __init__(self):
        self.videos = {}
        self.threads = {}
        self.deleted = []
        self.updated = []
        self.channel_calls = 0
        self.fail = False
        self._ids = itertools.count(1)

    def __call__(self, user):
        if not user.access_token:
            raise ExternalAccessRequired()
        return self

    def _check(self, action):
        if self.fail:
            raise ExternalServiceError(f"YouTube API failed to {action}")

    def add_video(self, video_id, **kwargs):
        self.videos[video_id] = video_payload(video_id, **kwargs)
        return self.videos[video_id]

    def get_video_details(self, video_id):
        self._check("fetch video details")
        if video_id not in self.videos:
            raise NotFoundError("Video not found on YouTube")
        return self.videos[video_id]

    def insert_comment(self, video_id, text):
        self._check("add comment")
        top = comment_payload(f"yt-comment-{next(self._ids)}", text)
        return {"id": top["id"], "snippet": {"videoId": video_id, "topLevelComment": top}}

    def reply_to_comment(self, parent_comment_id, text):
        self._check("reply to comment")
        return comment_payload(
            f"yt-reply-{next(self._ids)}", text, parent_id=parent_comment_id
        )

    def delete_comment(self, comment_id):
        self._check("delete comment")
        self.deleted.append(comment_id)

    def update_video(self, video_id, title=None, description=None):
        self._check("update video")
        payload = self.get_video_details(video_id)
        payload["snippet"]["title"] = title
        payload["snippet"]["description"] = description
        self.updated.append(video_id)
        return {"id": video_id, "snippet": dict(payload["snippet"])}

    def list_channel_videos(self, max_results=50):
        self._check("list channel videos")
        self.channel_calls += 1
        return [
            {
                "id": {"kind": "youtube#video", "videoId": video_id},
                "snippet": payload["snippet"],
            }
            for video_id, payload in list(self.videos.items())[:max_results]
        ]

    def list_comment_threads(self, video_id, max_pages=10):
        self._check("fetch comments")
        return self.threads.get(video_id, [])


class FakeCache:
    """Dictionary-backed replacement for RedisClient's JSON helpers."""

    def __init__(self):
        self.store = {}

    def get_json(self, key):
        return self.store.get(key)

    def set_json(self, key, value, expire=None):
        self.store[key] = value
        return True

    def delete(self, key):
        return self.store.pop(key, None) is not None


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def youtube():
    return FakeYouTube()


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def client(engine, youtube, cache):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_youtube_factory] = lambda: youtube
    app.dependency_overrides[get_redis] = lambda: cache

    yield TestClient(app)

    app.dependency_overrides.clear()


def make_user(db, suffix="1", access_token="ya29.youtube-token"):
    user = User(
        google_id=f"google-{suffix}",
        email=f"creator{suffix}@example.com",
        name=f"Creator {suffix}",
        access_token=access_token,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(user):
    return {"Authorization": f"Bearer {AuthService.issue_access(user.id)}"}


@pytest.fixture
def user(db):
    return make_user(db, "1")


@pytest.fixture
def other_user(db):
    return make_user(db, "2")


@pytest.fixture
def headers(user):
    return bearer(user)


@pytest.fixture
def other_headers(other_user):
    return bearer(other_user)


@pytest.fixture
def synced_video(client, youtube, headers):
    """A video synced into the dashboard of the default user."""
    youtube.add_video("abc123XYZ00", title="Launch video")
    response = client.post(
        "/api/videos/sync", json={"externalVideoId": "abc123XYZ00"}, headers=headers
    )
    assert response.status_code == 201
    return response.json()["video"]


def minutes_ago(minutes):
    return datetime.utcnow() - timedelta(minutes=minutes)
