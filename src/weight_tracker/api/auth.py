"""Auth API endpoints and the request session dependency."""

import logging
from collections.abc import Awaitable

import httpx
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from weight_tracker.api.schemas import (
    AuthResponse,
    LoginRequest,
    PasswordResetRequest,
    PasswordUpdateRequest,
    SignupRequest,
)
from weight_tracker.containers import AppContainer
from weight_tracker.domain.auth import AuthApiError, AuthResult, SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def provider_error_detail(container: AppContainer, exc: Exception) -> str:
    """Return a user-facing provider error with local debug info."""
    fallback = "Authentication service is unavailable. Please try again."
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


async def require_session(
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> SessionContext:
    """Resolve the bearer token into the caller's session context."""
    token = bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        user = await container.auth_service.current_user(token)
    except AuthApiError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc
    except httpx.HTTPError as exc:
        logger.exception("Failed to resolve session")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=provider_error_detail(container, exc),
        ) from exc
    return SessionContext(user_id=user.id, email=user.email, access_token=token)


def _respond(result: AuthResult, failure_status: int) -> AuthResponse:
    if not result.success:
        raise HTTPException(status_code=failure_status, detail=result.message)
    session = result.session
    return AuthResponse(
        success=True,
        message=result.message,
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
        user_id=session.user.id if session else None,
    )


async def _call_provider(
    container: AppContainer, action: Awaitable[AuthResult]
) -> AuthResult:
    try:
        return await action
    except httpx.HTTPError as exc:
        logger.exception("Auth provider request failed")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=provider_error_detail(container, exc),
        ) from exc


@router.post("/signup")
async def signup(
    payload: SignupRequest, container: AppContainer = Depends(get_container)
) -> AuthResponse:
    """Create an account."""
    result = await _call_provider(
        container,
        container.auth_service.signup(
            email=payload.email,
            password=payload.password,
            username=payload.username,
            include_demo_data=payload.include_demo_data,
            first_name=payload.first_name,
            last_name=payload.last_name,
        ),
    )
    return _respond(result, status.HTTP_400_BAD_REQUEST)


@router.post("/login")
async def login(
    payload: LoginRequest, container: AppContainer = Depends(get_container)
) -> AuthResponse:
    """Exchange credentials for tokens."""
    result = await _call_provider(
        container, container.auth_service.login(payload.email, payload.password)
    )
    return _respond(result, status.HTTP_401_UNAUTHORIZED)


@router.post("/logout")
async def logout(
    session: SessionContext = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Revoke the caller's session."""
    try:
        await container.auth_service.logout(session.access_token)
    except AuthApiError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message
        ) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=provider_error_detail(container, exc),
        ) from exc
    return {"status": "ok"}


@router.post("/password")
async def update_password(
    payload: PasswordUpdateRequest,
    session: SessionContext = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> AuthResponse:
    """Change the caller's password."""
    result = await _call_provider(
        container,
        container.auth_service.update_password(
            access_token=session.access_token,
            email=session.email,
            current_password=payload.current_password,
            new_password=payload.new_password,
        ),
    )
    return _respond(result, status.HTTP_400_BAD_REQUEST)


@router.post("/password-reset")
async def password_reset(
    payload: PasswordResetRequest, container: AppContainer = Depends(get_container)
) -> AuthResponse:
    """Send a password recovery email."""
    result = await _call_provider(
        container, container.auth_service.send_password_reset(payload.email)
    )
    return _respond(result, status.HTTP_400_BAD_REQUEST)
