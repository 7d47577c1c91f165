"""Supabase implementation for restaurants and their realtime changes."""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from restaurant_tracker.domain.changes import ChangeEvent, ChangeKind
from restaurant_tracker.domain.errors import (
    LoadFailure,
    SubscriptionFailure,
    WriteFailure,
)
from restaurant_tracker.domain.restaurants import (
    Restaurant,
    StoredRestaurant,
    parse_restaurant,
)
from restaurant_tracker.services.restaurants import RestaurantRepository

logger = logging.getLogger(__name__)


@dataclass
class SupabaseRestaurantRepository(RestaurantRepository):
    """Supabase-backed repository keeping one JSON blob per restaurant."""

    supabase_url: str
    supabase_key: str
    rating_categories: Sequence[str]
    table_name: str = "restaurants"
    channel_name: str = "restaurants-rt"
    client: AsyncClient | None = None

    async def list_all(self) -> list[StoredRestaurant]:
        """Return every restaurant ordered by last update, newest first."""
        client = await self._get_client()
        try:
            response = (
                await client.table(self.table_name)
                .select("*")
                .order("updated_at", desc=True)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise LoadFailure("Failed to load restaurants") from exc
        rows: list[StoredRestaurant] = []
        for row in response.data or []:
            stored = _parse_row(row, self.rating_categories)
            if stored is None:
                logger.warning("Skipping unreadable restaurant row: %s", row.get("id"))
                continue
            rows.append(stored)
        return rows

    async def upsert(self, restaurant: Restaurant) -> None:
        """Insert or fully replace the restaurant row keyed by id."""
        client = await self._get_client()
        try:
            await (
                client.table(self.table_name)
                .upsert(
                    {"id": restaurant.id, "data": restaurant.to_dict()},
                    on_conflict="id",
                )
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise WriteFailure(f"Failed to save restaurant {restaurant.id}") from exc

    async def delete(self, restaurant_id: str) -> None:
        """Delete the restaurant row; deleting a missing id is not an error."""
        client = await self._get_client()
        try:
            await (
                client.table(self.table_name)
                .delete()
                .eq("id", restaurant_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise WriteFailure(f"Failed to delete restaurant {restaurant_id}") from exc

    async def subscribe(
        self,
        on_event: Callable[[ChangeEvent], None],
        on_status: Callable[[str], None],
    ) -> object:
        """Open a realtime channel on the restaurants table."""
        client = await self._get_client()
        channel = client.channel(self.channel_name)

        def handle_change(payload: dict[str, Any]) -> None:
            event = parse_change_payload(payload, self.rating_categories)
            if event is None:
                logger.warning("Ignoring unreadable realtime payload")
                return
            on_event(event)

        def handle_status(state: object, error: Exception | None = None) -> None:
            if error is not None:
                logger.warning("Realtime channel reported an error: %s", error)
            on_status(str(getattr(state, "value", state)))

        channel.on_postgres_changes(
            "*", schema="public", table=self.table_name, callback=handle_change
        )
        try:
            await channel.subscribe(handle_status)
        except Exception as exc:
            raise SubscriptionFailure("Failed to open realtime channel") from exc
        return channel

    async def unsubscribe(self, handle: object) -> None:
        """Remove the realtime channel."""
        client = await self._get_client()
        await client.remove_channel(handle)

    async def _get_client(self) -> AsyncClient:
        if self.client is None:
            self.client = await acreate_client(self.supabase_url, self.supabase_key)
        return self.client


def parse_change_payload(
    payload: Mapping[str, Any], categories: Sequence[str]
) -> ChangeEvent | None:
    """Translate a realtime postgres_changes payload into a change event."""
    body = payload.get("data")
    if not isinstance(body, Mapping) or "type" not in body:
        body = payload
    raw_kind = body.get("type") or body.get("eventType")
    try:
        kind = ChangeKind(str(raw_kind).upper())
    except ValueError:
        return None

    if kind is ChangeKind.DELETE:
        old = body.get("old_record") or body.get("old") or {}
        key = old.get("id")
        if key in (None, ""):
            return None
        return ChangeEvent(kind=kind, key=str(key))

    record = body.get("record") or body.get("new") or {}
    data = record.get("data")
    if not isinstance(data, Mapping):
        return None
    try:
        restaurant = parse_restaurant(data, categories)
    except ValueError:
        return None
    return ChangeEvent(kind=kind, key=restaurant.id, value=restaurant)


def _parse_row(
    row: Mapping[str, Any], categories: Sequence[str]
) -> StoredRestaurant | None:
    """Parse a restaurants row into a stored restaurant."""
    data = row.get("data")
    if not isinstance(data, Mapping):
        return None
    try:
        restaurant = parse_restaurant(data, categories)
    except ValueError:
        return None
    updated_raw = row.get("updated_at")
    updated_at = (
        datetime.fromisoformat(updated_raw)
        if isinstance(updated_raw, str) and updated_raw
        else None
    )
    return StoredRestaurant(restaurant=restaurant, updated_at=updated_at)
