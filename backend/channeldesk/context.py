"""Per-request caller identity shared by the routers and stores."""

from dataclasses import dataclass

from channeldesk.models.user import User


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller, passed explicitly from router to store."""

    user: User

    @property
    def user_id(self) -> int:
        return self.user.id
