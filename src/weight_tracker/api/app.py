"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

import httpx
from fastapi import (
    Depends,
    FastAPI,
    HTTPException,
    Request,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weight_tracker.api.auth import get_container, require_session
from weight_tracker.api.auth import router as auth_router
from weight_tracker.api.schemas import (
    BMIOut,
    DashboardOut,
    GoalOut,
    ProfileOut,
    ProfileUpdateRequest,
    RecordResponse,
    StatsOut,
    WeightEntryIn,
    WeightEntryOut,
)
from weight_tracker.app_logging import configure_logging
from weight_tracker.config import parse_cors_origins
from weight_tracker.containers import AppContainer
from weight_tracker.domain.auth import AuthApiError, SessionContext
from weight_tracker.domain.profiles import UserProfile
from weight_tracker.domain.weights import WeightEntry
from weight_tracker.services.validation import InvalidInputError

POLICY_VIOLATION = 1008
INTERNAL_ERROR = 1011


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(auth_router)

    @app.exception_handler(InvalidInputError)
    async def invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/weights")
    def list_weights(
        days: int | None = None,
        start: date | None = None,
        end: date | None = None,
        session: SessionContext = Depends(require_session),
        state_container: AppContainer = Depends(get_container),
    ) -> list[WeightEntryOut]:
        """Return entries, optionally narrowed to a window or date range."""
        entries = state_container.weight_service.list_entries(session.user_id)
        if days is not None or start is not None or end is not None:
            entries = state_container.dashboard_service.filter_entries(
                entries, days, start, end
            )
        return [WeightEntryOut.from_domain(entry) for entry in entries]

    @app.post("/weights")
    def record_weight(
        payload: WeightEntryIn,
        session: SessionContext = Depends(require_session),
        state_container: AppContainer = Depends(get_container),
    ) -> RecordResponse:
        """Record a weight; an existing entry for the date is replaced."""
        result = state_container.weight_service.record_weight(
            session.user_id, payload.date, payload.weight
        )
        return RecordResponse(
            entry=WeightEntryOut.from_domain(result.entry), is_update=result.is_update
        )

    @app.put("/weights/{entry_id}")
    def update_weight(
        entry_id: UUID,
        payload: WeightEntryIn,
        session: SessionContext = Depends(require_session),
        state_container: AppContainer = Depends(get_container),
    ) -> WeightEntryOut:
        """Edit an entry's date and weight."""
        updated = state_container.weight_service.update_entry(
            session.user_id, entry_id, payload.date, payload.weight
        )
        if updated is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return WeightEntryOut.from_domain(updated)

    @app.delete("/weights/{entry_id}")
    def delete_weight(
        entry_id: UUID,
        session: SessionContext = Depends(require_session),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, str]:
        """Delete an entry."""
        if not state_container.weight_service.delete_entry(session.user_id, entry_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "ok"}

    @app.get("/dashboard")
    def dashboard(
        days: int | None = None,
        start: date | None = None,
        end: date | None = None,
        session: SessionContext = Depends(require_session),
        state_container: AppContainer = Depends(get_container),
    ) -> DashboardOut:
        """Return stats, BMI, goal progress and the windowed entries."""
        summary = state_container.dashboard_service.build(
            session.user_id, days=days, start=start, end=end
        )
        return DashboardOut(
            entries=[WeightEntryOut.from_domain(entry) for entry in summary.entries],
            stats=StatsOut.from_domain(summary.stats),
            bmi=BMIOut.from_domain(summary.bmi),
            goal=GoalOut.from_domain(summary.goal) if summary.goal else None,
        )

    @app.get("/profile")
    def get_profile(
        session: SessionContext = Depends(require_session),
        state_container: AppContainer = Depends(get_container),
    ) -> ProfileOut:
        """Return the caller's profile."""
        profile = state_container.profile_service.get_profile(session.user_id)
        if profile is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return ProfileOut.from_domain(profile)

    @app.patch("/profile")
    def update_profile(
        payload: ProfileUpdateRequest,
        session: SessionContext = Depends(require_session),
        state_container: AppContainer = Depends(get_container),
    ) -> ProfileOut:
        """Update username, height and goal weight."""
        profile = state_container.profile_service.update(
            session.user_id,
            username=payload.username,
            height=payload.height,
            goal_weight=payload.goal_weight,
        )
        if profile is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return ProfileOut.from_domain(profile)

    @app.post("/profile/reset")
    def reset_profile(
        session: SessionContext = Depends(require_session),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, str]:
        """Delete all weights and clear height and goal weight."""
        state_container.profile_service.reset_data(session.user_id)
        return {"status": "ok"}

    @app.websocket("/ws")
    async def live_updates(websocket: WebSocket, token: str) -> None:
        """Push weight and profile snapshots until the client disconnects."""
        state_container: AppContainer = websocket.app.state.container
        try:
            user = await state_container.auth_service.current_user(token)
        except AuthApiError:
            await websocket.close(code=POLICY_VIOLATION)
            return
        except httpx.HTTPError:
            logger.exception("Failed to resolve live updates session")
            await websocket.close(code=INTERNAL_ERROR)
            return
        await websocket.accept()

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[dict[str, object]] = asyncio.Queue()

        def forward(kind: str) -> Callable[[object], None]:
            def push(snapshot: object) -> None:
                loop.call_soon_threadsafe(
                    queue.put_nowait, _snapshot_message(kind, snapshot)
                )

            return push

        subscriptions = [
            state_container.weight_service.subscribe(user.id, forward("weights")),
            state_container.profile_service.subscribe(user.id, forward("profile")),
        ]

        async def send_updates() -> None:
            while True:
                await websocket.send_json(await queue.get())

        sender = asyncio.create_task(send_updates())
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info("Live updates closed: user_id=%s", user.id)
        finally:
            sender.cancel()
            for subscription in subscriptions:
                subscription.cancel()

    return app


def _snapshot_message(kind: str, snapshot: object) -> dict[str, object]:
    if kind == "weights" and isinstance(snapshot, list):
        entries = [
            WeightEntryOut.from_domain(entry).model_dump(mode="json")
            for entry in snapshot
            if isinstance(entry, WeightEntry)
        ]
        return {"type": "weights", "entries": entries}
    profile = (
        ProfileOut.from_domain(snapshot).model_dump(mode="json")
        if isinstance(snapshot, UserProfile)
        else None
    )
    return {"type": "profile", "profile": profile}
