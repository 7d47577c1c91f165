"""Domain models for store change notifications."""

from dataclasses import dataclass
from enum import Enum

from restaurant_tracker.domain.restaurants import Restaurant


class ChangeKind(str, Enum):
    """Kinds of row changes delivered by the store."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """A single row change; ``value`` is absent for deletes."""

    kind: ChangeKind
    key: str
    value: Restaurant | None = None


class SyncStatus(str, Enum):
    """Advisory status of the realtime subscription."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    LIVE = "live"
    ERROR = "error"
