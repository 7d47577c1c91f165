"""Domain models for tracked restaurants."""

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

RATING_MIN = 0
RATING_MAX = 5


@dataclass(frozen=True)
class Restaurant:
    """A restaurant the user has visited or wants to try."""

    id: str
    name: str
    neighborhood: str
    cuisine: str
    address: str = ""
    notes: str = ""
    visited: bool = False
    ratings: Mapping[str, int] = field(default_factory=dict)
    lat: float | None = None
    lng: float | None = None
    photos: tuple[str, ...] = ()

    @property
    def want_to_try(self) -> bool:
        """Want-to-try is the negation of visited, never stored on its own."""
        return not self.visited

    @property
    def average_rating(self) -> float | None:
        """Mean rating across categories, or None when not yet visited."""
        if not self.visited or not self.ratings:
            return None
        return round(sum(self.ratings.values()) / len(self.ratings), 1)

    def to_dict(self) -> dict[str, object]:
        """Serialize into the JSON blob kept in the store's data column."""
        return {
            "id": self.id,
            "name": self.name,
            "neighborhood": self.neighborhood,
            "cuisine": self.cuisine,
            "address": self.address,
            "notes": self.notes,
            "visited": self.visited,
            "wantToTry": self.want_to_try,
            "ratings": dict(self.ratings),
            "lat": self.lat,
            "lng": self.lng,
            "photos": list(self.photos),
        }


@dataclass(frozen=True)
class StoredRestaurant:
    """A restaurant row as read back from the store."""

    restaurant: Restaurant
    updated_at: datetime | None


def new_restaurant_id() -> str:
    """Return a fresh id derived from the current time in milliseconds."""
    return str(time.time_ns() // 1_000_000)


def normalize_ratings(
    raw: object, categories: Sequence[str], visited: bool = True
) -> dict[str, int]:
    """Return ratings with every category present and clamped to 0-5."""
    source = raw if isinstance(raw, Mapping) else {}
    ratings: dict[str, int] = {}
    for category in categories:
        value = source.get(category, 0) if visited else 0
        try:
            score = int(value)
        except (TypeError, ValueError):
            score = 0
        ratings[category] = max(RATING_MIN, min(RATING_MAX, score))
    return ratings


def parse_restaurant(
    data: Mapping[str, object], categories: Sequence[str]
) -> Restaurant:
    """Parse a stored JSON blob into a restaurant.

    Raises ``ValueError`` when the blob has no usable id or name.
    """
    restaurant_id = data.get("id")
    name = data.get("name")
    if restaurant_id in (None, "") or not isinstance(name, str) or not name.strip():
        raise ValueError("Restaurant blob is missing an id or name")
    photos = data.get("photos") or []
    return Restaurant(
        id=str(restaurant_id),
        name=name,
        neighborhood=str(data.get("neighborhood") or ""),
        cuisine=str(data.get("cuisine") or ""),
        address=str(data.get("address") or ""),
        notes=str(data.get("notes") or ""),
        visited=data.get("visited") is True,
        ratings=normalize_ratings(data.get("ratings"), categories),
        lat=_parse_coordinate(data.get("lat")),
        lng=_parse_coordinate(data.get("lng")),
        photos=tuple(str(photo) for photo in photos if photo),
    )


def _parse_coordinate(value: object) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Catalog:
    """City-specific choices offered by the editing form."""

    neighborhoods: Sequence[str]
    cuisines: Sequence[str]
    rating_categories: Sequence[str]
    default_lat: float
    default_lng: float


@dataclass(frozen=True)
class RestaurantDraft:
    """Fields collected by the editing form; ``id`` is None for new entries."""

    name: str
    id: str | None = None
    neighborhood: str | None = None
    cuisine: str | None = None
    address: str = ""
    notes: str = ""
    visited: bool = False
    ratings: Mapping[str, int] = field(default_factory=dict)
    lat: float | None = None
    lng: float | None = None
    photos: Sequence[str] = ()


def build_restaurant(
    draft: RestaurantDraft, restaurant_id: str, catalog: Catalog
) -> Restaurant:
    """Turn a completed draft into a full record, filling catalog defaults."""
    return Restaurant(
        id=restaurant_id,
        name=draft.name.strip(),
        neighborhood=_pick(draft.neighborhood, catalog.neighborhoods),
        cuisine=_pick(draft.cuisine, catalog.cuisines),
        address=draft.address.strip(),
        notes=draft.notes.strip(),
        visited=draft.visited,
        ratings=normalize_ratings(
            draft.ratings, catalog.rating_categories, visited=draft.visited
        ),
        lat=catalog.default_lat if draft.lat is None else draft.lat,
        lng=catalog.default_lng if draft.lng is None else draft.lng,
        photos=tuple(draft.photos),
    )


def _pick(value: str | None, choices: Sequence[str]) -> str:
    if value and value in choices:
        return value
    return choices[0] if choices else (value or "")
