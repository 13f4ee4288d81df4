from __future__ import annotations

import asyncio

from hr_portal.core.enums import NotificationKind
from hr_portal.listing.notifications import NotificationChannel


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_second_show_replaces_first():
    clock = FakeClock()
    channel = NotificationChannel(4.0, clock=clock)

    channel.success("Premier")
    channel.error("Second")

    assert channel.current.message == "Second"
    assert channel.current.kind is NotificationKind.ERROR


def test_auto_hides_after_duration_measured_from_last_show():
    clock = FakeClock()
    channel = NotificationChannel(4.0, clock=clock)

    channel.success("Premier")
    clock.now += 3.0
    channel.warning("Second")
    clock.now += 3.5

    assert channel.visible
    clock.now += 0.5
    assert channel.current is None


def test_dismiss_hides_and_notifies_listeners():
    events = []
    channel = NotificationChannel(4.0, clock=FakeClock())
    channel.subscribe(events.append)

    note = channel.success("Ok")
    channel.dismiss()
    channel.dismiss()

    assert events == [note, None]
    assert channel.current is None


def test_unsubscribe_stops_events():
    events = []
    channel = NotificationChannel(4.0, clock=FakeClock())
    unsubscribe = channel.subscribe(events.append)

    unsubscribe()
    channel.success("Ok")

    assert events == []


def test_timer_hides_inside_running_loop():
    events = []

    async def scenario():
        channel = NotificationChannel(0.2)
        channel.subscribe(events.append)
        channel.success("Premier")
        await asyncio.sleep(0.1)
        channel.error("Second")
        await asyncio.sleep(0.15)
        still_visible = channel.current
        await asyncio.sleep(0.2)
        return still_visible, channel.current

    during, after = asyncio.run(scenario())

    assert during is not None and during.message == "Second"
    assert after is None
    assert [e.message if e else None for e in events] == ["Premier", "Second", None]


def test_snapshot_exposes_kind_and_remaining_time():
    clock = FakeClock()
    channel = NotificationChannel(4.0, clock=clock)
    channel.warning("Attention")
    clock.now += 1.0

    assert channel.snapshot() == {"message": "Attention", "kind": "warning", "expires_in": 3.0}
