"""Short-lived user notifications."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from enum import Enum


class NotificationLevel(str, Enum):
    """Tone of a notification."""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Notification:
    """A status message; ``expires_at`` is unset until first delivered."""

    message: str
    level: NotificationLevel
    created_at: datetime
    expires_at: datetime | None = None


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class Notifier:
    """Collects notifications and dismisses them a fixed time after delivery.

    The display timer starts the first time a notification is read, so a
    message raised before any client is listening (a failed startup load)
    is still shown for the full duration.
    """

    display_seconds: float = 2.5
    clock: Callable[[], datetime] = _utcnow
    _entries: list[Notification] = field(default_factory=list)

    def notify(
        self, message: str, level: NotificationLevel = NotificationLevel.SUCCESS
    ) -> Notification:
        """Record a notification and return it."""
        notification = Notification(
            message=message, level=level, created_at=self.clock()
        )
        self._entries.append(notification)
        return notification

    def active(self) -> list[Notification]:
        """Return unexpired notifications, oldest first, starting pending timers."""
        now = self.clock()
        deadline = now + timedelta(seconds=self.display_seconds)
        delivered = [
            entry
            if entry.expires_at is not None
            else replace(entry, expires_at=deadline)
            for entry in self._entries
        ]
        self._entries = [
            entry
            for entry in delivered
            if entry.expires_at is not None and now < entry.expires_at
        ]
        return list(self._entries)
