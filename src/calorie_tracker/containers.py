"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.openai_food_client import OpenAIFoodClient
from calorie_tracker.adapters.supabase_state_store import SupabaseStateStore
from calorie_tracker.config import Settings, resolve_provider
from calorie_tracker.services.chart import TrendChartMapper
from calorie_tracker.services.lookup import FoodLookupService
from calorie_tracker.services.tracker import TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    tracker: TrackerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    state_store = SupabaseStateStore(
        client=supabase_client, table=resolved_settings.state_table
    )
    provider = resolve_provider(resolved_settings)
    food_client = OpenAIFoodClient.create(
        api_key=resolved_settings.ai_api_key,
        model=provider.model,
        base_url=provider.base_url,
        timeout_seconds=resolved_settings.lookup_timeout_seconds,
    )
    lookup_service = FoodLookupService(
        client=food_client,
        timeout_seconds=resolved_settings.lookup_timeout_seconds,
    )
    tracker = TrackerService.load(
        state_store,
        key_prefix=resolved_settings.state_key_prefix,
        lookup_service=lookup_service,
        chart_mapper=TrendChartMapper(
            width=resolved_settings.chart_width,
            height=resolved_settings.chart_height,
        ),
        timezone_name=resolved_settings.timezone,
        window_size=resolved_settings.chart_window_size,
    )

    async def close_resources() -> None:
        await food_client.close()

    return AppContainer(
        settings=resolved_settings,
        tracker=tracker,
        close_resources=close_resources,
    )
