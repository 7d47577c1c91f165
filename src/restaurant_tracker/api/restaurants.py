"""Restaurant API endpoints backed by the restaurant book."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Query, Request, status

from restaurant_tracker.api.restaurant_models import RestaurantDraftPayload
from restaurant_tracker.domain.reconciliation import VisitFilter
from restaurant_tracker.services.restaurants import RemoveOutcome, SaveOutcome

if TYPE_CHECKING:
    from restaurant_tracker.containers import AppContainer
    from restaurant_tracker.domain.restaurants import Restaurant

router = APIRouter(prefix="/restaurants", tags=["restaurants"])

_SAVE_ERRORS = {
    SaveOutcome.BUSY: (status.HTTP_409_CONFLICT, "A save is already in progress."),
    SaveOutcome.INVALID: (
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "A restaurant needs a name.",
    ),
    SaveOutcome.FAILED: (status.HTTP_502_BAD_GATEWAY, "Failed to save."),
}


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def serialize_restaurant(restaurant: Restaurant) -> dict[str, object]:
    """Return the stored blob plus derived fields for the UI."""
    return {**restaurant.to_dict(), "averageRating": restaurant.average_rating}


@router.get("")
async def list_restaurants(
    request: Request,
    visit_filter: VisitFilter = Query(default=VisitFilter.ALL, alias="filter"),
    q: str | None = None,
) -> dict[str, object]:
    """Return the filtered, searched collection with header counters."""
    container = _container(request)
    book = container.restaurant_book
    counts = book.counts()
    return {
        "restaurants": [
            serialize_restaurant(item) for item in book.visible(visit_filter, q)
        ],
        "counts": {
            "visited": counts.visited,
            "wantToTry": counts.want_to_try,
            "total": counts.total,
        },
        "saving": book.is_saving,
        "sync_status": container.realtime_sync.status.value,
    }


@router.get("/markers")
async def list_markers(
    request: Request,
    visit_filter: VisitFilter = Query(default=VisitFilter.ALL, alias="filter"),
) -> dict[str, object]:
    """Return map pins for the visible restaurants."""
    book = _container(request).restaurant_book
    return {"markers": [asdict(marker) for marker in book.markers(visit_filter)]}


@router.get("/{restaurant_id}")
async def get_restaurant(restaurant_id: str, request: Request) -> dict[str, object]:
    """Return one restaurant for the editing form."""
    restaurant = _container(request).restaurant_book.get(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_restaurant(restaurant)


@router.post("")
async def save_restaurant(
    payload: RestaurantDraftPayload, request: Request
) -> dict[str, object]:
    """Create or fully replace a restaurant."""
    result = await _container(request).restaurant_book.save(payload.to_draft())
    if result.outcome is not SaveOutcome.SAVED or result.restaurant is None:
        status_code, detail = _SAVE_ERRORS[result.outcome]
        raise HTTPException(status_code=status_code, detail=detail)
    return {
        "status": result.outcome.value,
        "restaurant": serialize_restaurant(result.restaurant),
    }


@router.delete("/{restaurant_id}")
async def delete_restaurant(
    restaurant_id: str, request: Request, confirm: bool = False
) -> dict[str, str]:
    """Remove a restaurant; the caller must pass ``confirm=true``."""
    outcome = await _container(request).restaurant_book.remove(
        restaurant_id, confirmed=confirm
    )
    if outcome is RemoveOutcome.CANCELLED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Removal must be confirmed.",
        )
    if outcome is RemoveOutcome.FAILED:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to delete."
        )
    return {"status": outcome.value}
