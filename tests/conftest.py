"""Shared test fixtures."""

import asyncio
import json
from dataclasses import dataclass, field

import pytest

from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.foods import LibraryItem
from calorie_tracker.services.chart import TrendChartMapper
from calorie_tracker.services.lookup import FoodEstimateClient, FoodLookupService
from calorie_tracker.services.storage import KeyValueStore
from calorie_tracker.services.tracker import TrackerService


@dataclass
class InMemoryStateStore(KeyValueStore):
    """In-memory key/value store for tests."""

    data: dict[str, object] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)
    fail_writes: bool = False

    def get(self, key: str) -> object | None:
        value = self.data.get(key)
        if value is None:
            return None
        return json.loads(json.dumps(value))

    def set(self, key: str, value: object) -> None:
        if self.fail_writes:
            raise ConnectionError("store offline")
        self.writes.append(key)
        self.data[key] = json.loads(json.dumps(value))


@dataclass
class FakeFoodEstimateClient(FoodEstimateClient):
    """Fake estimate client returning a fixed answer."""

    text: str = json.dumps({"name": "Ramen", "unit": "bowl", "calories": 550})
    error: Exception | None = None
    delay_seconds: float = 0.0
    prompts: list[str] = field(default_factory=list)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class CountingResolver:
    """Resolver callable that counts invocations."""

    item: LibraryItem
    calls: int = 0

    async def __call__(self) -> LibraryItem:
        self.calls += 1
        return self.item


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        ai_api_key="ai-key",
    )


@pytest.fixture
def state_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def food_client() -> FakeFoodEstimateClient:
    return FakeFoodEstimateClient()


@pytest.fixture
def tracker(
    state_store: InMemoryStateStore, food_client: FakeFoodEstimateClient
) -> TrackerService:
    return TrackerService.load(
        state_store,
        key_prefix="test",
        lookup_service=FoodLookupService(client=food_client, timeout_seconds=1.0),
        chart_mapper=TrendChartMapper(width=600, height=200),
    )


@pytest.fixture
def container(settings: Settings, tracker: TrackerService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        tracker=tracker,
        close_resources=close_resources,
    )
