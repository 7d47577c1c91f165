"""Map pin descriptions for the map widget."""

from dataclasses import dataclass

from restaurant_tracker.domain.restaurants import Restaurant

VISITED_COLORS = ("#3d8b5e", "#2a5c34")
WANT_TO_TRY_COLORS = ("#e8a020", "#b07020")


@dataclass(frozen=True)
class MapMarker:
    """Everything the map widget needs to draw one restaurant pin."""

    id: str
    name: str
    lat: float
    lng: float
    visited: bool
    color: str
    border: str
    cuisine: str
    neighborhood: str
    photo: str | None
    notes: str
    average_rating: float | None


def marker_for(restaurant: Restaurant) -> MapMarker | None:
    """Return a pin for the restaurant, or None when it has no coordinates."""
    if not restaurant.lat or not restaurant.lng:
        return None
    color, border = VISITED_COLORS if restaurant.visited else WANT_TO_TRY_COLORS
    return MapMarker(
        id=restaurant.id,
        name=restaurant.name,
        lat=restaurant.lat,
        lng=restaurant.lng,
        visited=restaurant.visited,
        color=color,
        border=border,
        cuisine=restaurant.cuisine,
        neighborhood=restaurant.neighborhood,
        photo=restaurant.photos[0] if restaurant.photos else None,
        average_rating=restaurant.average_rating,
        notes=restaurant.notes,
    )
