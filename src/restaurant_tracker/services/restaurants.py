"""Reconciliation of the in-memory restaurant collection with the store."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from restaurant_tracker.domain import reconciliation
from restaurant_tracker.domain.changes import ChangeEvent
from restaurant_tracker.domain.markers import MapMarker, marker_for
from restaurant_tracker.domain.reconciliation import Collection, VisitFilter
from restaurant_tracker.domain.restaurants import (
    Catalog,
    Restaurant,
    RestaurantDraft,
    StoredRestaurant,
    build_restaurant,
    new_restaurant_id,
)
from restaurant_tracker.services.notifications import NotificationLevel, Notifier

logger = logging.getLogger(__name__)

MESSAGE_ADDED = "✅ Added!"
MESSAGE_UPDATED = "✅ Updated!"
MESSAGE_SAVE_FAILED = "⚠️ Failed to save"
MESSAGE_REMOVED = "🗑️ Removed"
MESSAGE_REMOVE_FAILED = "⚠️ Failed to delete"
MESSAGE_LOAD_FAILED = "⚠️ Could not load restaurants"


class RestaurantRepository(Protocol):
    """Persistence interface for restaurants and their change stream."""

    async def list_all(self) -> list[StoredRestaurant]:
        """Return every restaurant, most recently updated first."""

    async def upsert(self, restaurant: Restaurant) -> None:
        """Insert the restaurant or fully replace the stored one."""

    async def delete(self, restaurant_id: str) -> None:
        """Delete the restaurant with the given id."""

    async def subscribe(
        self,
        on_event: Callable[[ChangeEvent], None],
        on_status: Callable[[str], None],
    ) -> object:
        """Start delivering row changes and return a subscription handle."""

    async def unsubscribe(self, handle: object) -> None:
        """Release a subscription handle."""


class SaveOutcome(str, Enum):
    """Result of a save command."""

    SAVED = "saved"
    FAILED = "failed"
    BUSY = "busy"
    INVALID = "invalid"


class RemoveOutcome(str, Enum):
    """Result of a remove command."""

    REMOVED = "removed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save along with the record that was written."""

    outcome: SaveOutcome
    restaurant: Restaurant | None = None


@dataclass(frozen=True)
class RestaurantCounts:
    """Header counters for the list view."""

    visited: int
    want_to_try: int

    @property
    def total(self) -> int:
        return self.visited + self.want_to_try


@dataclass
class RestaurantBook:
    """Owns the canonical restaurant collection shown to the user.

    Three producers write into the collection: the initial load, optimistic
    merges after successful writes, and remote change events. All of them go
    through the same id-keyed merge, so an echoed confirmation of a local
    write is a no-op.
    """

    repository: RestaurantRepository
    notifier: Notifier
    catalog: Catalog
    id_factory: Callable[[], str] = new_restaurant_id
    _collection: Collection = field(default=(), init=False)
    _saving: bool = field(default=False, init=False)
    _loaded: bool = field(default=False, init=False)

    @property
    def records(self) -> Collection:
        """Current collection, most recently touched first."""
        return self._collection

    @property
    def is_saving(self) -> bool:
        """True while a save round-trip is in flight."""
        return self._saving

    async def load(self) -> None:
        """Fetch the initial collection once; degrade to empty on failure."""
        if self._loaded:
            logger.warning("Restaurant collection already loaded; ignoring reload")
            return
        self._loaded = True
        try:
            rows = await self.repository.list_all()
        except Exception:
            logger.exception("Failed to load restaurants")
            self.notifier.notify(MESSAGE_LOAD_FAILED, NotificationLevel.FAILURE)
            return
        loaded = reconciliation.from_rows(row.restaurant for row in rows)
        # Entries merged while the read was in flight are newer than the read.
        for restaurant in reversed(self._collection):
            loaded = reconciliation.upsert(loaded, restaurant)
        self._collection = loaded
        logger.info("Loaded %d restaurants", len(self._collection))

    async def save(self, draft: RestaurantDraft) -> SaveResult:
        """Write a draft to the store and merge it locally on success."""
        if self._saving:
            logger.info("Ignoring save while another save is in flight")
            return SaveResult(SaveOutcome.BUSY)
        if not draft.name.strip():
            return SaveResult(SaveOutcome.INVALID)

        is_update = bool(draft.id)
        restaurant_id = draft.id if draft.id else self.id_factory()
        restaurant = build_restaurant(draft, restaurant_id, self.catalog)

        self._saving = True
        try:
            await self.repository.upsert(restaurant)
        except Exception:
            logger.exception(
                "Failed to save restaurant", extra={"restaurant_id": restaurant.id}
            )
            self.notifier.notify(MESSAGE_SAVE_FAILED, NotificationLevel.FAILURE)
            return SaveResult(SaveOutcome.FAILED, restaurant)
        finally:
            self._saving = False

        self._collection = reconciliation.upsert(self._collection, restaurant)
        self.notifier.notify(MESSAGE_UPDATED if is_update else MESSAGE_ADDED)
        return SaveResult(SaveOutcome.SAVED, restaurant)

    async def remove(self, restaurant_id: str, *, confirmed: bool) -> RemoveOutcome:
        """Delete a restaurant after the user confirmed the prompt."""
        if not confirmed:
            return RemoveOutcome.CANCELLED
        try:
            await self.repository.delete(restaurant_id)
        except Exception:
            logger.exception(
                "Failed to delete restaurant", extra={"restaurant_id": restaurant_id}
            )
            self.notifier.notify(MESSAGE_REMOVE_FAILED, NotificationLevel.FAILURE)
            return RemoveOutcome.FAILED
        self._collection = reconciliation.remove(self._collection, restaurant_id)
        self.notifier.notify(MESSAGE_REMOVED)
        return RemoveOutcome.REMOVED

    def on_remote_change(self, event: ChangeEvent) -> None:
        """Merge a change delivered by the store's change stream."""
        logger.debug("Applying %s for restaurant %s", event.kind.value, event.key)
        self._collection = reconciliation.apply_change(self._collection, event)

    def get(self, restaurant_id: str) -> Restaurant | None:
        for restaurant in self._collection:
            if restaurant.id == restaurant_id:
                return restaurant
        return None

    def visible(
        self,
        visit_filter: VisitFilter = VisitFilter.ALL,
        query: str | None = None,
    ) -> list[Restaurant]:
        """Return the filtered and searched view; never mutates the collection."""
        return reconciliation.visible(self._collection, visit_filter, query)

    def counts(self) -> RestaurantCounts:
        visited = sum(1 for restaurant in self._collection if restaurant.visited)
        return RestaurantCounts(
            visited=visited, want_to_try=len(self._collection) - visited
        )

    def markers(self, visit_filter: VisitFilter = VisitFilter.ALL) -> list[MapMarker]:
        """Return map pins for visible restaurants that have coordinates."""
        pins = (marker_for(restaurant) for restaurant in self.visible(visit_filter))
        return [pin for pin in pins if pin is not None]
