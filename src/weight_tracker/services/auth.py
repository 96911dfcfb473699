"""Authentication flows over the auth provider."""

import logging
from dataclasses import dataclass
from typing import Protocol

from weight_tracker.domain.auth import AuthApiError, AuthResult, AuthSession, AuthUser
from weight_tracker.services.profiles import ProfileService
from weight_tracker.services.validation import (
    MIN_PASSWORD_LENGTH,
    validate_email,
    validate_name,
    validate_password,
    validate_username,
)

_logger = logging.getLogger(__name__)

_SIGNUP_MESSAGES = {
    "user_already_exists": "User already exists",
    "email_exists": "User already exists",
    "weak_password": "Password is too weak",
    "email_address_invalid": "Invalid email format",
    "validation_failed": "Invalid email format",
}
_LOGIN_MESSAGES = {
    "invalid_credentials": "Invalid email or password",
    "invalid_grant": "Invalid email or password",
    "user_not_found": "Invalid email or password",
    "email_not_confirmed": (
        "Please verify your email before logging in. "
        "Check your inbox for the verification link."
    ),
    "over_request_rate_limit": "Too many failed attempts. Please try again later.",
}
_PASSWORD_MESSAGES = {
    "invalid_credentials": "Current password is incorrect",
    "invalid_grant": "Current password is incorrect",
    "weak_password": "New password is too weak",
    "same_password": "New password must be different from current password",
    "reauthentication_needed": "Please log out and log back in, then try again",
}
_RESET_MESSAGES = {
    "user_not_found": "No account found with this email",
    "email_address_invalid": "Invalid email format",
    "validation_failed": "Invalid email format",
    "over_email_send_rate_limit": "Too many requests. Please try again later.",
    "over_request_rate_limit": "Too many requests. Please try again later.",
}
_TOO_MANY_REQUESTS = 429


class AuthClient(Protocol):
    """Interface for the hosted auth provider."""

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, object]
    ) -> AuthUser:
        """Register a user and return it."""

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session."""

    async def sign_out(self, access_token: str) -> None:
        """Revoke a session."""

    async def get_user(self, access_token: str) -> AuthUser:
        """Return the user that owns an access token."""

    async def update_password(self, access_token: str, new_password: str) -> None:
        """Change the password of the token's user."""

    async def send_password_reset(self, email: str) -> None:
        """Send a password recovery email."""


def _message_for(
    exc: AuthApiError, messages: dict[str, str], fallback: str
) -> str:
    if exc.code in messages:
        return messages[exc.code]
    if exc.status_code == _TOO_MANY_REQUESTS:
        return "Too many requests. Please try again later."
    return exc.message or fallback


@dataclass
class AuthService:
    """Application service for sign up, login and password management."""

    client: AuthClient
    profile_service: ProfileService
    demo_data_on_signup: bool = True

    async def signup(  # noqa: PLR0913
        self,
        email: str,
        password: str,
        username: str,
        include_demo_data: bool | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> AuthResult:
        """Create an account; the user must verify their email before login."""
        if not email or not password or not username:
            return AuthResult(success=False, message="All fields are required")
        for check in (
            validate_email(email),
            validate_password(password),
            validate_username(username),
            validate_name("First name", first_name),
            validate_name("Last name", last_name),
        ):
            if not check.valid:
                return AuthResult(success=False, message=check.message or "")

        metadata: dict[str, object] = {"username": username.strip()}
        if first_name:
            metadata["first_name"] = first_name.strip()
        if last_name:
            metadata["last_name"] = last_name.strip()

        try:
            user = await self.client.sign_up(email, password, metadata)
        except AuthApiError as exc:
            _logger.warning("Signup failed: code=%s", exc.code)
            return AuthResult(
                success=False,
                message=_message_for(exc, _SIGNUP_MESSAGES, "Failed to create account"),
            )

        seed = (
            self.demo_data_on_signup if include_demo_data is None else include_demo_data
        )
        try:
            self.profile_service.create_profile(
                user.id, email, username.strip(), include_demo_data=seed
            )
        except Exception:
            _logger.exception("Profile setup failed after signup: user_id=%s", user.id)
            return AuthResult(
                success=False,
                message=(
                    "Account created but profile setup failed. "
                    "Please verify your email and log in to finish setup."
                ),
            )
        return AuthResult(
            success=True,
            message=(
                "Account created! Please check your email to verify your account "
                "before logging in."
            ),
        )

    async def login(self, email: str, password: str) -> AuthResult:
        """Sign in a user with a verified email."""
        if not email or not password:
            return AuthResult(
                success=False, message="Email and password are required"
            )
        try:
            session = await self.client.sign_in(email, password)
        except AuthApiError as exc:
            _logger.warning("Login failed: code=%s", exc.code)
            return AuthResult(
                success=False,
                message=_message_for(exc, _LOGIN_MESSAGES, "Failed to login"),
            )

        if not session.user.email_confirmed:
            await self.client.sign_out(session.access_token)
            return AuthResult(
                success=False, message=_LOGIN_MESSAGES["email_not_confirmed"]
            )

        self.profile_service.ensure_profile(
            session.user.id, session.user.email or email
        )
        return AuthResult(success=True, message="Login successful", session=session)

    async def logout(self, access_token: str) -> None:
        """Revoke the caller's session."""
        try:
            await self.client.sign_out(access_token)
        except Exception:
            _logger.exception("Logout failed")
            raise

    async def update_password(
        self,
        access_token: str,
        email: str,
        current_password: str,
        new_password: str,
    ) -> AuthResult:
        """Change a password after re-checking the current one."""
        if not access_token or not email:
            return AuthResult(
                success=False, message="No user is currently logged in"
            )
        if not current_password or not new_password:
            return AuthResult(success=False, message="All fields are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return AuthResult(
                success=False,
                message=(
                    f"New password must be at least {MIN_PASSWORD_LENGTH} characters"
                ),
            )
        if current_password == new_password:
            return AuthResult(
                success=False, message=_PASSWORD_MESSAGES["same_password"]
            )

        try:
            session = await self.client.sign_in(email, current_password)
            await self.client.update_password(session.access_token, new_password)
        except AuthApiError as exc:
            _logger.warning("Password update failed: code=%s", exc.code)
            return AuthResult(
                success=False,
                message=_message_for(
                    exc, _PASSWORD_MESSAGES, "Failed to update password"
                ),
            )
        return AuthResult(success=True, message="Password updated successfully")

    async def send_password_reset(self, email: str) -> AuthResult:
        """Send a recovery email."""
        if not email:
            return AuthResult(success=False, message="Email is required")
        try:
            await self.client.send_password_reset(email)
        except AuthApiError as exc:
            _logger.warning("Password reset failed: code=%s", exc.code)
            return AuthResult(
                success=False,
                message=_message_for(exc, _RESET_MESSAGES, "Failed to send reset email"),
            )
        return AuthResult(
            success=True, message="Password reset email sent successfully"
        )

    async def current_user(self, access_token: str) -> AuthUser:
        """Resolve an access token to its user."""
        return await self.client.get_user(access_token)
