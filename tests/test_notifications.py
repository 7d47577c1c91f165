"""Tests for transient notifications."""

from datetime import timedelta

from restaurant_tracker.services.notifications import NotificationLevel, Notifier
from tests.conftest import FakeClock


def test_notifications_expire_after_display_duration(
    notifier: Notifier, clock: FakeClock
) -> None:
    notifier.notify("✅ Added!")
    assert [entry.message for entry in notifier.active()] == ["✅ Added!"]

    clock.advance(1)
    notifier.notify("⚠️ Failed to save", NotificationLevel.FAILURE)

    assert [entry.message for entry in notifier.active()] == [
        "✅ Added!",
        "⚠️ Failed to save",
    ]

    clock.advance(2)

    remaining = notifier.active()
    assert [entry.message for entry in remaining] == ["⚠️ Failed to save"]
    assert remaining[0].level is NotificationLevel.FAILURE

    clock.advance(1)

    assert notifier.active() == []


def test_display_timer_starts_on_first_delivery(
    notifier: Notifier, clock: FakeClock
) -> None:
    notifier.notify("⚠️ Could not load restaurants", NotificationLevel.FAILURE)
    clock.advance(60)

    first = notifier.active()

    assert [entry.message for entry in first] == ["⚠️ Could not load restaurants"]
    assert first[0].expires_at == clock.now + timedelta(seconds=2.5)

    clock.advance(2)
    assert len(notifier.active()) == 1

    clock.advance(1)
    assert notifier.active() == []
