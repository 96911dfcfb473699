"""Supabase Auth (GoTrue) REST client."""

from dataclasses import dataclass
from uuid import UUID

import httpx

from weight_tracker.domain.auth import AuthApiError, AuthSession, AuthUser
from weight_tracker.services.auth import AuthClient


@dataclass
class HttpxAuthClient(AuthClient):
    """Auth client implemented with httpx against the GoTrue REST API."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, supabase_url: str, api_key: str, timeout: float = 15
    ) -> "HttpxAuthClient":
        """Create an auth client with a managed httpx session."""
        return cls(
            base_url=f"{supabase_url.rstrip('/')}/auth/v1",
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, object]
    ) -> AuthUser:
        """Register a user; confirmation emails are sent by the provider."""
        response = await self.http_client.post(
            f"{self.base_url}/signup",
            headers=self._headers(),
            json={"email": email, "password": password, "data": metadata},
            timeout=self.timeout,
        )
        payload = _check(response)
        # Auto-confirmed projects answer with a session wrapping the user.
        user = payload.get("user") if "access_token" in payload else payload
        return _parse_user(user if isinstance(user, dict) else {})

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        response = await self.http_client.post(
            f"{self.base_url}/token",
            params={"grant_type": "password"},
            headers=self._headers(),
            json={"email": email, "password": password},
            timeout=self.timeout,
        )
        payload = _check(response)
        user = payload.get("user")
        return AuthSession(
            access_token=str(payload["access_token"]),
            refresh_token=payload.get("refresh_token"),
            user=_parse_user(user if isinstance(user, dict) else {}),
        )

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        response = await self.http_client.post(
            f"{self.base_url}/logout",
            headers=self._headers(access_token),
            timeout=self.timeout,
        )
        _check(response)

    async def get_user(self, access_token: str) -> AuthUser:
        """Return the user for an access token."""
        response = await self.http_client.get(
            f"{self.base_url}/user",
            headers=self._headers(access_token),
            timeout=self.timeout,
        )
        return _parse_user(_check(response))

    async def update_password(self, access_token: str, new_password: str) -> None:
        """Set a new password for the token's user."""
        response = await self.http_client.put(
            f"{self.base_url}/user",
            headers=self._headers(access_token),
            json={"password": new_password},
            timeout=self.timeout,
        )
        _check(response)

    async def send_password_reset(self, email: str) -> None:
        """Send a password recovery email."""
        response = await self.http_client.post(
            f"{self.base_url}/recover",
            headers=self._headers(),
            json={"email": email},
            timeout=self.timeout,
        )
        _check(response)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token or self.api_key}",
        }


def _check(response: httpx.Response) -> dict[str, object]:
    """Return the JSON body, raising ``AuthApiError`` for error statuses."""
    try:
        payload = response.json() if response.content else {}
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}
    if response.is_error:
        code = payload.get("error_code") or payload.get("error") or str(
            response.status_code
        )
        message = (
            payload.get("msg")
            or payload.get("error_description")
            or payload.get("message")
            or response.text
        )
        raise AuthApiError(
            code=str(code), message=str(message), status_code=response.status_code
        )
    return payload


def _parse_user(payload: dict[str, object]) -> AuthUser:
    if "id" not in payload:
        raise AuthApiError(code="invalid_response", message="Auth user missing id")
    metadata = payload.get("user_metadata")
    return AuthUser(
        id=UUID(str(payload["id"])),
        email=str(payload.get("email") or ""),
        email_confirmed=bool(
            payload.get("email_confirmed_at") or payload.get("confirmed_at")
        ),
        metadata=metadata if isinstance(metadata, dict) else {},
    )
