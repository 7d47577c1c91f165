"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from restaurant_tracker.adapters.supabase_restaurant_repository import (
    SupabaseRestaurantRepository,
)
from restaurant_tracker.config import Settings
from restaurant_tracker.domain.restaurants import Catalog
from restaurant_tracker.services.notifications import Notifier
from restaurant_tracker.services.restaurants import RestaurantBook
from restaurant_tracker.services.sync import RealtimeSync


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: Catalog
    notifier: Notifier
    restaurant_book: RestaurantBook
    realtime_sync: RealtimeSync
    open_resources: Callable[[], Awaitable[None]]
    close_resources: Callable[[], Awaitable[None]]


def build_catalog(settings: Settings) -> Catalog:
    """Return the form choices configured for this deployment."""
    return Catalog(
        neighborhoods=tuple(settings.neighborhoods),
        cuisines=tuple(settings.cuisines),
        rating_categories=tuple(settings.rating_categories),
        default_lat=settings.default_lat,
        default_lng=settings.default_lng,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    catalog = build_catalog(resolved_settings)
    repository = SupabaseRestaurantRepository(
        supabase_url=resolved_settings.supabase_url,
        supabase_key=resolved_settings.supabase_key,
        rating_categories=catalog.rating_categories,
        table_name=resolved_settings.restaurants_table,
        channel_name=resolved_settings.realtime_channel,
    )
    notifier = Notifier(display_seconds=resolved_settings.notification_seconds)
    restaurant_book = RestaurantBook(
        repository=repository, notifier=notifier, catalog=catalog
    )
    realtime_sync = RealtimeSync(repository=repository, book=restaurant_book)

    async def open_resources() -> None:
        # Subscribe before reading so no change falls between the two.
        await realtime_sync.start()
        await restaurant_book.load()

    async def close_resources() -> None:
        await realtime_sync.stop()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        notifier=notifier,
        restaurant_book=restaurant_book,
        realtime_sync=realtime_sync,
        open_resources=open_resources,
        close_resources=close_resources,
    )
