"""Identity resolver for Google sign-in credentials."""

from dataclasses import dataclass
from typing import Any, Dict

import httpx
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from sqlalchemy.orm import Session

from channeldesk.config import settings
from channeldesk.exceptions import InvalidExternalCredential, MissingEmail
from channeldesk.logger import auth_logger
from channeldesk.models.user import User


@dataclass(frozen=True)
class ExternalIdentity:
    """Normalized identity extracted from a verified Google credential."""

    external_id: str
    email: str
    display_name: str | None = None
    picture_url: str | None = None


def looks_like_id_token(credential: str) -> bool:
    """ID tokens are three-segment JWTs; OAuth access tokens are opaque."""
    return credential.count(".") == 2


class IdentityResolver:
    """Exchange a Google credential for a local user record."""

    def __init__(self, http_client: httpx.Client | None = None):
        self.http_client = http_client

    def _verify_id_token(self, credential: str) -> Dict[str, Any]:
        return id_token.verify_oauth2_token(
            credential, google_requests.Request(), audience=settings.google_client_id
        )

    def _fetch_userinfo(self, credential: str) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {credential}"}
        if self.http_client is not None:
            response = self.http_client.get(settings.google_userinfo_url, headers=headers)
        else:
            with httpx.Client(timeout=10.0) as client:
                response = client.get(settings.google_userinfo_url, headers=headers)
        response.raise_for_status()
        return response.json()

    def verify_credential(self, credential: str) -> ExternalIdentity:
        """
        Verify a Google credential and normalize its claims.

        Args:
            credential: Google ID token or OAuth access token

        Returns:
            ExternalIdentity with subject id, email and profile data

        Raises:
            InvalidExternalCredential: Neither verification path accepted it
            MissingEmail: Credential verified but carries no email
        """
        claims: Dict[str, Any] | None = None

        if looks_like_id_token(credential):
            try:
                claims = self._verify_id_token(credential)
                auth_logger.debug("Credential verified as Google ID token")
            except (ValueError, google_exceptions.GoogleAuthError) as e:
                auth_logger.info(f"ID token verification failed, trying userinfo: {e}")

        if claims is None:
            try:
                claims = self._fetch_userinfo(credential)
                auth_logger.debug("Credential verified through userinfo endpoint")
            except (httpx.HTTPError, ValueError) as e:
                auth_logger.warning(f"Userinfo verification failed: {e}")
                raise InvalidExternalCredential()

        external_id = claims.get("sub") or claims.get("id")
        if not external_id:
            raise InvalidExternalCredential("Credential has no subject identifier")

        email = claims.get("email")
        if not email:
            raise MissingEmail()

        return ExternalIdentity(
            external_id=str(external_id),
            email=email,
            display_name=claims.get("name") or claims.get("given_name"),
            picture_url=claims.get("picture"),
        )

    def resolve(self, db: Session, credential: str) -> User:
        """
        Get existing user or create new one from a Google credential.

        The presented credential always replaces the stored YouTube access token.

        Args:
            db: Database session
            credential: Google ID token or OAuth access token

        Returns:
            User object
        """
        identity = self.verify_credential(credential)

        # Match on Google subject first, then on email
        user = db.query(User).filter_by(google_id=identity.external_id).first()
        if not user:
            user = db.query(User).filter_by(email=identity.email).first()

        if not user:
            user = User(
                google_id=identity.external_id,
                email=identity.email,
                name=identity.display_name,
                picture_url=identity.picture_url,
                access_token=credential,
            )
            db.add(user)
            auth_logger.info(f"Created user for Google account {identity.email}")
        else:
            user.google_id = identity.external_id
            user.email = identity.email
            user.access_token = credential
            user.name = identity.display_name or user.name
            user.picture_url = identity.picture_url or user.picture_url

        db.commit()
        db.refresh(user)

        return user
