"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from restaurant_tracker.config import Settings
from restaurant_tracker.containers import AppContainer, build_catalog
from restaurant_tracker.domain.changes import ChangeEvent, ChangeKind
from restaurant_tracker.domain.errors import LoadFailure, WriteFailure
from restaurant_tracker.domain.restaurants import (
    Catalog,
    Restaurant,
    StoredRestaurant,
)
from restaurant_tracker.services.notifications import Notifier
from restaurant_tracker.services.restaurants import (
    RestaurantBook,
    RestaurantRepository,
)
from restaurant_tracker.services.sync import RealtimeSync

RATING_CATEGORIES = ("Food", "Vibe", "Service", "Price")


def make_restaurant(restaurant_id: str, name: str, **overrides: object) -> Restaurant:
    fields: dict[str, object] = {
        "id": restaurant_id,
        "name": name,
        "neighborhood": "Södermalm",
        "cuisine": "Swedish",
        "ratings": dict.fromkeys(RATING_CATEGORIES, 0),
        "lat": 59.3293,
        "lng": 18.0686,
    }
    fields.update(overrides)
    return Restaurant(**fields)  # type: ignore[arg-type]


@dataclass
class InMemoryRestaurantStore(RestaurantRepository):
    """In-memory restaurant store that records calls and echoes writes."""

    rows: list[StoredRestaurant] = field(default_factory=list)
    fail_load: bool = False
    fail_writes: bool = False
    fail_subscribe: bool = False
    echo_writes: bool = False
    write_gate: asyncio.Event | None = None
    upserts: list[Restaurant] = field(default_factory=list)
    deletes: list[str] = field(default_factory=list)
    on_event: Callable[[ChangeEvent], None] | None = None
    on_status: Callable[[str], None] | None = None
    unsubscribed: list[object] = field(default_factory=list)

    async def list_all(self) -> list[StoredRestaurant]:
        if self.fail_load:
            raise LoadFailure("store unavailable")
        return list(self.rows)

    async def upsert(self, restaurant: Restaurant) -> None:
        if self.write_gate is not None:
            await self.write_gate.wait()
        if self.fail_writes:
            raise WriteFailure("write rejected")
        self.upserts.append(restaurant)
        if self.echo_writes and self.on_event is not None:
            self.on_event(
                ChangeEvent(kind=ChangeKind.UPDATE, key=restaurant.id, value=restaurant)
            )

    async def delete(self, restaurant_id: str) -> None:
        if self.fail_writes:
            raise WriteFailure("delete rejected")
        self.deletes.append(restaurant_id)

    async def subscribe(
        self,
        on_event: Callable[[ChangeEvent], None],
        on_status: Callable[[str], None],
    ) -> object:
        if self.fail_subscribe:
            raise RuntimeError("socket refused")
        self.on_event = on_event
        self.on_status = on_status
        return "handle-1"

    async def unsubscribe(self, handle: object) -> None:
        self.unsubscribed.append(handle)
        self.on_event = None
        if self.on_status is not None:
            self.on_status("CLOSED")

    def emit(self, event: ChangeEvent) -> None:
        assert self.on_event is not None
        self.on_event(event)


@dataclass
class FakeClock:
    """Manually advanced clock for notification expiry."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="anon-key",
    )


@pytest.fixture
def catalog(settings: Settings) -> Catalog:
    return build_catalog(settings)


@pytest.fixture
def store() -> InMemoryRestaurantStore:
    return InMemoryRestaurantStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier(clock: FakeClock) -> Notifier:
    return Notifier(display_seconds=2.5, clock=clock)


@pytest.fixture
def book(
    store: InMemoryRestaurantStore, notifier: Notifier, catalog: Catalog
) -> RestaurantBook:
    ids = iter(str(1700000000000 + offset) for offset in range(1000))
    return RestaurantBook(
        repository=store,
        notifier=notifier,
        catalog=catalog,
        id_factory=lambda: next(ids),
    )


@pytest.fixture
def container(
    settings: Settings,
    catalog: Catalog,
    store: InMemoryRestaurantStore,
    notifier: Notifier,
    book: RestaurantBook,
) -> AppContainer:
    realtime_sync = RealtimeSync(repository=store, book=book)

    async def open_resources() -> None:
        await realtime_sync.start()
        await book.load()

    async def close_resources() -> None:
        await realtime_sync.stop()

    return AppContainer(
        settings=settings,
        catalog=catalog,
        notifier=notifier,
        restaurant_book=book,
        realtime_sync=realtime_sync,
        open_resources=open_resources,
        close_resources=close_resources,
    )
