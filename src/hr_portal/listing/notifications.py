from __future__ import annotations

import asyncio
import itertools
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..core.constants import DEFAULT_NOTIFICATION_SECONDS
from ..core.enums import NotificationKind


@dataclass(frozen=True)
class Notification:
    message: str
    kind: NotificationKind
    seq: int
    shown_at: float
    expires_at: float

    def to_dict(self, now: float) -> dict:
        return {
            "message": self.message,
            "kind": self.kind.value,
            "expires_in": max(0.0, round(self.expires_at - now, 3)),
        }


Listener = Callable[[Optional[Notification]], None]


class NotificationChannel:
    """Single slot, last write wins.

    A new notification replaces the current one and restarts the countdown.
    Listeners receive the notification on show and None when it is hidden.
    """

    def __init__(self, duration: float = DEFAULT_NOTIFICATION_SECONDS, *, clock: Callable[[], float] = time.monotonic):
        self._duration = float(duration)
        self._clock = clock
        self._seq = itertools.count(1)
        self._current: Optional[Notification] = None
        self._listeners: List[Listener] = []
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def duration(self) -> float:
        return self._duration

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def show(self, message: str, kind: NotificationKind = NotificationKind.SUCCESS) -> Notification:
        now = self._clock()
        note = Notification(
            message=message,
            kind=NotificationKind(kind),
            seq=next(self._seq),
            shown_at=now,
            expires_at=now + self._duration,
        )
        self._current = note
        self._arm_timer(note.seq)
        self._emit(note)
        return note

    def success(self, message: str) -> Notification:
        return self.show(message, NotificationKind.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.show(message, NotificationKind.ERROR)

    def warning(self, message: str) -> Notification:
        return self.show(message, NotificationKind.WARNING)

    def dismiss(self) -> None:
        if self._current is None:
            return
        self._current = None
        self._cancel_timer()
        self._emit(None)

    @property
    def current(self) -> Optional[Notification]:
        note = self._current
        if note is not None and self._clock() >= note.expires_at:
            return None
        return note

    @property
    def visible(self) -> bool:
        return self.current is not None

    def snapshot(self) -> Optional[dict]:
        note = self.current
        return note.to_dict(self._clock()) if note else None

    def _arm_timer(self, seq: int) -> None:
        self._cancel_timer()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timer = loop.call_later(self._duration, self._expire, seq)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self, seq: int) -> None:
        # A newer notification owns the slot; its own timer will fire.
        if self._current is None or self._current.seq != seq:
            return
        self._current = None
        self._timer = None
        self._emit(None)

    def _emit(self, note: Optional[Notification]) -> None:
        for listener in list(self._listeners):
            listener(note)
