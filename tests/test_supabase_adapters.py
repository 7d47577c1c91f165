"""Tests for the Supabase restaurant repository."""

import asyncio
from dataclasses import dataclass, field

import pytest
from postgrest.exceptions import APIError

from restaurant_tracker.adapters.supabase_restaurant_repository import (
    SupabaseRestaurantRepository,
    parse_change_payload,
)
from restaurant_tracker.domain.changes import ChangeEvent, ChangeKind
from restaurant_tracker.domain.errors import (
    LoadFailure,
    SubscriptionFailure,
    WriteFailure,
)
from tests.conftest import RATING_CATEGORIES, make_restaurant


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": [], "delete": []}
    )
    error: Exception | None = None
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    async def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeChannel:
    topic: str
    bindings: list[dict[str, object]] = field(default_factory=list)
    status_callback: object | None = None
    fail: bool = False

    def on_postgres_changes(self, event, schema, table, callback) -> "FakeChannel":  # type: ignore[no-untyped-def]
        self.bindings.append(
            {"event": event, "schema": schema, "table": table, "callback": callback}
        )
        return self

    async def subscribe(self, callback=None) -> "FakeChannel":  # type: ignore[no-untyped-def]
        if self.fail:
            raise ConnectionError("socket closed")
        self.status_callback = callback
        return self


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    channels: list[FakeChannel] = field(default_factory=list)
    removed: list[FakeChannel] = field(default_factory=list)
    fail_channels: bool = False

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]

    def channel(self, topic: str) -> FakeChannel:
        channel = FakeChannel(topic=topic, fail=self.fail_channels)
        self.channels.append(channel)
        return channel

    async def remove_channel(self, channel: FakeChannel) -> None:
        self.removed.append(channel)


def _repository(client: FakeSupabaseClient) -> SupabaseRestaurantRepository:
    return SupabaseRestaurantRepository(
        supabase_url="https://example.supabase.co",
        supabase_key="anon-key",
        rating_categories=RATING_CATEGORIES,
        client=client,  # type: ignore[arg-type]
    )


def _api_error() -> APIError:
    return APIError({"message": "permission denied", "code": "42501"})


def test_list_all_parses_rows_and_skips_broken_ones() -> None:
    client = FakeSupabaseClient()
    client.table("restaurants").queue(
        "select",
        [
            {
                "id": "2",
                "data": {"id": "2", "name": "Newest", "visited": True},
                "updated_at": "2024-05-02T10:00:00+00:00",
            },
            {"id": "bad", "data": None, "updated_at": None},
            {"id": "1", "data": {"id": "1", "name": "Oldest"}, "updated_at": None},
        ],
    )

    rows = asyncio.run(_repository(client).list_all())

    assert [row.restaurant.name for row in rows] == ["Newest", "Oldest"]
    assert rows[0].updated_at is not None
    assert rows[0].restaurant.ratings == dict.fromkeys(RATING_CATEGORIES, 0)
    assert client.tables["restaurants"].last_order == ("updated_at", True)


def test_list_all_wraps_api_errors() -> None:
    client = FakeSupabaseClient()
    client.table("restaurants").error = _api_error()

    with pytest.raises(LoadFailure):
        asyncio.run(_repository(client).list_all())


def test_upsert_writes_blob_keyed_by_id() -> None:
    client = FakeSupabaseClient()
    restaurant = make_restaurant("7", "Blob", visited=True)

    asyncio.run(_repository(client).upsert(restaurant))

    table = client.tables["restaurants"]
    assert table.last_payload == {"id": "7", "data": restaurant.to_dict()}
    assert table.last_on_conflict == "id"


def test_write_errors_become_write_failures() -> None:
    client = FakeSupabaseClient()
    client.table("restaurants").error = _api_error()
    repository = _repository(client)

    with pytest.raises(WriteFailure):
        asyncio.run(repository.upsert(make_restaurant("7", "Blob")))
    with pytest.raises(WriteFailure):
        asyncio.run(repository.delete("7"))


def test_delete_filters_by_id() -> None:
    client = FakeSupabaseClient()

    asyncio.run(_repository(client).delete("7"))

    assert client.tables["restaurants"].last_filters == [("id", "7")]


def test_subscribe_translates_payloads_and_status() -> None:
    client = FakeSupabaseClient()
    events: list[ChangeEvent] = []
    statuses: list[str] = []
    repository = _repository(client)

    handle = asyncio.run(repository.subscribe(events.append, statuses.append))

    channel = client.channels[0]
    assert channel.topic == "restaurants-rt"
    binding = channel.bindings[0]
    assert (binding["event"], binding["table"]) == ("*", "restaurants")
    callback = binding["callback"]
    callback(
        {
            "data": {
                "type": "INSERT",
                "record": {"id": "1", "data": {"id": "1", "name": "Live"}},
                "old_record": None,
            }
        }
    )
    callback({"data": {"type": "DELETE", "old_record": {"id": "1"}}})
    callback({"data": {"type": "TRUNCATE"}})
    channel.status_callback("SUBSCRIBED", None)  # type: ignore[misc, operator]

    assert [(event.kind, event.key) for event in events] == [
        (ChangeKind.INSERT, "1"),
        (ChangeKind.DELETE, "1"),
    ]
    assert events[0].value is not None and events[0].value.name == "Live"
    assert statuses == ["SUBSCRIBED"]

    asyncio.run(repository.unsubscribe(handle))
    assert client.removed == [channel]


def test_subscribe_failure_is_wrapped() -> None:
    client = FakeSupabaseClient(fail_channels=True)

    with pytest.raises(SubscriptionFailure):
        asyncio.run(_repository(client).subscribe(lambda _e: None, lambda _s: None))


def test_parse_change_payload_accepts_client_style_shape() -> None:
    event = parse_change_payload(
        {
            "eventType": "UPDATE",
            "new": {"id": "3", "data": {"id": "3", "name": "Moved"}},
            "old": {"id": "3"},
        },
        RATING_CATEGORIES,
    )

    assert event is not None
    assert event.kind is ChangeKind.UPDATE
    assert event.key == "3"
    broken = parse_change_payload({"eventType": "UPDATE", "new": {}}, RATING_CATEGORIES)
    assert broken is None
