"""Domain models for authentication."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """A user as reported by the auth provider."""

    id: UUID
    email: str
    email_confirmed: bool
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthSession:
    """Tokens issued after a successful sign in."""

    access_token: str
    refresh_token: str | None
    user: AuthUser


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an auth action with a user-facing message."""

    success: bool
    message: str
    session: AuthSession | None = None


@dataclass(frozen=True)
class SessionContext:
    """Identity of the caller for a single request."""

    user_id: UUID
    email: str
    access_token: str


class AuthApiError(Exception):
    """Raised when the auth provider rejects a request."""

    def __init__(self, code: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
