"""Tests for local token issuance, verification and the auth endpoints."""

from datetime import timedelta

import httpx
import pytest
from jose import jwt

from channeldesk.config import settings
from channeldesk.dependencies import get_identity_resolver
from channeldesk.exceptions import InvalidToken, UserNotFound, WrongTokenType
from channeldesk.main import app
from channeldesk.models import User
from channeldesk.services.auth_service import AuthService
from channeldesk.services.identity_service import IdentityResolver


def userinfo_resolver(claims, status_code=200):
    def handler(request):
        return httpx.Response(status_code, json=claims)

    return IdentityResolver(http_client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestAuthService:
    def test_access_token_round_trip(self, db, user):
        token = AuthService.issue_access(user.id)
        assert AuthService.verify(db, token).id == user.id

    def test_refresh_token_rejected_as_access(self, db, user):
        token = AuthService.issue_refresh(user.id)
        with pytest.raises(WrongTokenType):
            AuthService.verify(db, token)

    def test_access_token_rejected_as_refresh(self, db, user):
        token = AuthService.issue_access(user.id)
        with pytest.raises(WrongTokenType):
            AuthService.verify(db, token, expected_type="refresh")

    def test_expired_token(self, db, user):
        token = AuthService._encode(user.id, "access", timedelta(seconds=-10))
        with pytest.raises(InvalidToken):
            AuthService.verify(db, token)

    def test_token_signed_with_other_key(self, db, user):
        token = jwt.encode({"sub": str(user.id), "type": "access"}, "not-the-key")
        with pytest.raises(InvalidToken):
            AuthService.verify(db, token)

    def test_token_for_deleted_user(self, db, user):
        token = AuthService.issue_access(user.id)
        db.delete(user)
        db.commit()
        with pytest.raises(UserNotFound):
            AuthService.verify(db, token)

    def test_token_claims(self, user):
        payload = jwt.decode(
            AuthService.issue_refresh(user.id),
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        assert payload["sub"] == str(user.id)
        assert payload["type"] == "refresh"


class TestProtectedEndpoints:
    def test_missing_token(self, client):
        response = client.get("/api/videos")
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": "Access denied",
            "message": "No token provided",
        }

    def test_garbage_token(self, client):
        response = client.get(
            "/api/videos", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_refresh_token_cannot_call_api(self, client, user):
        token = AuthService.issue_refresh(user.id)
        response = client.get("/api/videos", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert response.json()["message"] == "Invalid token type"


class TestAuthEndpoints:
    @pytest.fixture(autouse=True)
    def clear_resolver(self):
        yield
        app.dependency_overrides.pop(get_identity_resolver, None)

    def test_external_sign_in_creates_user(self, client, db):
        app.dependency_overrides[get_identity_resolver] = lambda: userinfo_resolver(
            {"sub": "g-42", "email": "new@example.com", "name": "New Creator"}
        )

        response = client.post("/api/auth/external", json={"credential": "ya29.opaque"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"]["email"] == "new@example.com"
        assert body["user"]["hasYoutubeAccess"] is True
        assert body["accessToken"] and body["refreshToken"]

        stored = db.query(User).filter_by(google_id="g-42").one()
        assert stored.access_token == "ya29.opaque"

    def test_token_alias_and_google_route(self, client):
        app.dependency_overrides[get_identity_resolver] = lambda: userinfo_resolver(
            {"id": "g-7", "email": "alias@example.com"}
        )

        response = client.post("/api/auth/google", json={"token": "ya29.other"})

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "alias@example.com"

    def test_repeat_sign_in_reuses_user(self, client, db, user):
        app.dependency_overrides[get_identity_resolver] = lambda: userinfo_resolver(
            {"sub": user.google_id, "email": user.email, "name": "Renamed"}
        )

        response = client.post("/api/auth/external", json={"credential": "ya29.fresh"})

        assert response.json()["user"]["id"] == user.id
        assert db.query(User).count() == 1

    def test_rejected_credential(self, client):
        app.dependency_overrides[get_identity_resolver] = lambda: userinfo_resolver(
            {"error": "invalid_token"}, status_code=401
        )

        response = client.post("/api/auth/external", json={"credential": "ya29.bad"})

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_credential_without_email(self, client):
        app.dependency_overrides[get_identity_resolver] = lambda: userinfo_resolver(
            {"sub": "g-9"}
        )

        response = client.post("/api/auth/external", json={"credential": "ya29.noemail"})

        assert response.status_code == 400

    def test_missing_credential(self, client):
        response = client.post("/api/auth/external", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation Error"

    def test_refresh(self, client, user):
        refresh_token = AuthService.issue_refresh(user.id)

        response = client.post("/api/auth/refresh", json={"refreshToken": refresh_token})

        assert response.status_code == 200
        new_token = response.json()["accessToken"]
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {new_token}"})
        assert me.json()["user"]["id"] == user.id

    def test_refresh_with_access_token(self, client, user):
        response = client.post(
            "/api/auth/refresh", json={"refreshToken": AuthService.issue_access(user.id)}
        )
        assert response.status_code == 403

    def test_refresh_for_deleted_user(self, client, db, user):
        refresh_token = AuthService.issue_refresh(user.id)
        db.delete(user)
        db.commit()

        response = client.post("/api/auth/refresh", json={"refreshToken": refresh_token})

        assert response.status_code == 401

    def test_me(self, client, user, headers):
        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["user"]["email"] == user.email

    def test_store_youtube_token(self, client, db, headers, user):
        response = client.post(
            "/api/auth/youtube-token",
            json={"accessToken": "ya29.new", "refreshToken": "1//refresh"},
            headers=headers,
        )

        assert response.status_code == 200
        db.expire_all()
        stored = db.get(User, user.id)
        assert stored.access_token == "ya29.new"
        assert stored.refresh_token == "1//refresh"

    def test_logout(self, client, headers):
        response = client.post("/api/auth/logout", headers=headers)
        assert response.json() == {"success": True, "message": "Logged out successfully"}
