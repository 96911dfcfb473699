"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from weight_tracker.adapters.supabase_auth_client import HttpxAuthClient
from weight_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from weight_tracker.adapters.supabase_weight_repository import (
    SupabaseWeightRepository,
)
from weight_tracker.config import Settings
from weight_tracker.services.auth import AuthService
from weight_tracker.services.dashboard import DashboardService, local_clock
from weight_tracker.services.profiles import ProfileService
from weight_tracker.services.subscriptions import ChangeFeed
from weight_tracker.services.weights import WeightService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    change_feed: ChangeFeed
    weight_service: WeightService
    profile_service: ProfileService
    dashboard_service: DashboardService
    auth_service: AuthService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    clock = local_clock(resolved_settings.timezone)
    change_feed = ChangeFeed()
    weight_service = WeightService(
        repository=SupabaseWeightRepository(supabase_client),
        feed=change_feed,
    )
    profile_service = ProfileService(
        repository=SupabaseProfileRepository(supabase_client),
        weight_service=weight_service,
        feed=change_feed,
        clock=clock,
    )
    dashboard_service = DashboardService(
        weight_service=weight_service,
        profile_service=profile_service,
        clock=clock,
    )
    auth_client = HttpxAuthClient.create(
        supabase_url=resolved_settings.supabase_url,
        api_key=resolved_settings.supabase_anon_key,
        timeout=resolved_settings.auth_timeout_seconds,
    )
    auth_service = AuthService(
        client=auth_client,
        profile_service=profile_service,
        demo_data_on_signup=resolved_settings.demo_data_on_signup,
    )

    async def close_resources() -> None:
        await auth_client.close()

    return AppContainer(
        settings=resolved_settings,
        change_feed=change_feed,
        weight_service=weight_service,
        profile_service=profile_service,
        dashboard_service=dashboard_service,
        auth_service=auth_service,
        close_resources=close_resources,
    )
