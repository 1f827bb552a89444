from pydantic import AliasChoices, Field

from channeldesk.schemas.common import CamelModel, Envelope
from channeldesk.schemas.user import UserResponse


class ExternalAuthRequest(CamelModel):
    """Request body for exchanging a Google credential for local tokens."""

    credential: str = Field(
        min_length=1, validation_alias=AliasChoices("credential", "token")
    )


class AuthResponse(Envelope):
    """Local token pair issued after a successful identity exchange."""

    user: UserResponse
    access_token: str
    refresh_token: str


class RefreshTokenRequest(CamelModel):
    """Request body for token refresh."""

    refresh_token: str = Field(min_length=1)


class AccessTokenResponse(Envelope):
    """New access token issued from a refresh token."""

    access_token: str


class YouTubeTokenRequest(CamelModel):
    """Request body for storing an externally issued YouTube credential."""

    access_token: str = Field(min_length=1)
    refresh_token: str | None = None


class TokenData(CamelModel):
    """Data extracted from a local JWT."""

    user_id: int
    token_type: str
