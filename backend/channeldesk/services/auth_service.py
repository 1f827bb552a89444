"""Authentication service for issuing and verifying local JWT tokens."""

from datetime import datetime, timedelta
from typing import Dict, Any

from jose import jwt, JWTError
from sqlalchemy.orm import Session

from channeldesk.config import settings
from channeldesk.exceptions import InvalidToken, UserNotFound, WrongTokenType
from channeldesk.logger import auth_logger
from channeldesk.models.user import User
from channeldesk.schemas.auth import TokenData

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class AuthService:
    """Service for handling authentication and authorization."""

    @staticmethod
    def _encode(user_id: int, token_type: str, expires_delta: timedelta) -> str:
        to_encode: Dict[str, Any] = {
            "sub": str(user_id),
            "type": token_type,
            "exp": datetime.utcnow() + expires_delta,
        }
        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    @staticmethod
    def issue_access(user_id: int) -> str:
        """
        Create a JWT access token.

        Args:
            user_id: Local user ID the token is bound to

        Returns:
            Encoded JWT token
        """
        return AuthService._encode(
            user_id,
            ACCESS_TOKEN_TYPE,
            timedelta(days=settings.access_token_expire_days),
        )

    @staticmethod
    def issue_refresh(user_id: int) -> str:
        """
        Create a JWT refresh token.

        Args:
            user_id: Local user ID the token is bound to

        Returns:
            Encoded JWT refresh token
        """
        return AuthService._encode(
            user_id,
            REFRESH_TOKEN_TYPE,
            timedelta(days=settings.refresh_token_expire_days),
        )

    @staticmethod
    def create_tokens_for_user(user: User) -> Dict[str, str]:
        """
        Create both access and refresh tokens for a user.

        Args:
            user: User object

        Returns:
            Dictionary with access_token and refresh_token
        """
        return {
            "access_token": AuthService.issue_access(user.id),
            "refresh_token": AuthService.issue_refresh(user.id),
        }

    @staticmethod
    def decode(token: str) -> TokenData:
        """
        Decode a local JWT without checking its type.

        Raises:
            InvalidToken: Signature, expiry or payload is invalid
        """
        try:
            payload = jwt.decode(
                token, settings.secret_key, algorithms=[settings.algorithm]
            )
            return TokenData(user_id=int(payload["sub"]), token_type=payload["type"])
        except (JWTError, KeyError, TypeError, ValueError) as e:
            auth_logger.debug(f"Token rejected: {e}")
            raise InvalidToken()

    @staticmethod
    def verify(
        db: Session, token: str, expected_type: str = ACCESS_TOKEN_TYPE
    ) -> User:
        """
        Verify a local token and load the user it is bound to.

        The user is looked up on every call so tokens for deleted users stop
        working immediately.

        Args:
            db: Database session
            token: Encoded JWT
            expected_type: "access" or "refresh"

        Returns:
            User object

        Raises:
            InvalidToken: Token cannot be decoded
            WrongTokenType: Token type discriminator does not match
            UserNotFound: User was deleted after issuance
        """
        data = AuthService.decode(token)

        if data.token_type != expected_type:
            auth_logger.info(
                f"Rejected {data.token_type} token where {expected_type} was expected"
            )
            raise WrongTokenType()

        user = db.query(User).filter(User.id == data.user_id).first()
        if not user:
            raise UserNotFound()

        return user
