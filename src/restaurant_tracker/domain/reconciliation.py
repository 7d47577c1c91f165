"""Pure merge functions over the in-memory restaurant collection.

Every function takes the current collection and returns a new tuple; the
input is never mutated. Merges are keyed by restaurant id, so applying the
same change twice leaves the collection as applying it once.
"""

from collections.abc import Iterable
from enum import Enum

from restaurant_tracker.domain.changes import ChangeEvent, ChangeKind
from restaurant_tracker.domain.restaurants import Restaurant

Collection = tuple[Restaurant, ...]


class VisitFilter(str, Enum):
    """Partition of the collection by visit status."""

    ALL = "all"
    VISITED = "visited"
    WANT_TO_TRY = "wantToTry"


def from_rows(restaurants: Iterable[Restaurant]) -> Collection:
    """Build a collection from load order, keeping the first row per id."""
    seen: set[str] = set()
    collection: list[Restaurant] = []
    for restaurant in restaurants:
        if restaurant.id in seen:
            continue
        seen.add(restaurant.id)
        collection.append(restaurant)
    return tuple(collection)


def upsert(collection: Collection, restaurant: Restaurant) -> Collection:
    """Replace the entry with the same id in place, or prepend it."""
    for index, existing in enumerate(collection):
        if existing.id == restaurant.id:
            return collection[:index] + (restaurant,) + collection[index + 1 :]
    return (restaurant, *collection)


def remove(collection: Collection, restaurant_id: str) -> Collection:
    """Drop the entry with the given id; no-op when absent."""
    return tuple(item for item in collection if item.id != restaurant_id)


def apply_change(collection: Collection, event: ChangeEvent) -> Collection:
    """Merge a store change event into the collection."""
    if event.kind is ChangeKind.DELETE:
        return remove(collection, event.key)
    if event.value is None:
        return collection
    return upsert(collection, event.value)


def matches_filter(restaurant: Restaurant, visit_filter: VisitFilter) -> bool:
    if visit_filter is VisitFilter.VISITED:
        return restaurant.visited
    if visit_filter is VisitFilter.WANT_TO_TRY:
        return not restaurant.visited
    return True


def matches_query(restaurant: Restaurant, query: str | None) -> bool:
    """Case-insensitive substring match on name, neighborhood and cuisine."""
    if not query:
        return True
    needle = query.lower()
    return any(
        needle in field.lower()
        for field in (restaurant.name, restaurant.neighborhood, restaurant.cuisine)
    )


def visible(
    collection: Collection,
    visit_filter: VisitFilter = VisitFilter.ALL,
    query: str | None = None,
) -> list[Restaurant]:
    """Return the records passing both the visit filter and the search query."""
    return [
        restaurant
        for restaurant in collection
        if matches_filter(restaurant, visit_filter)
        and matches_query(restaurant, query)
    ]
