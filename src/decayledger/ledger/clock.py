# src/decayledger/ledger/clock.py
from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall-clock seconds since the epoch, clamped to never go backwards.

    time.time() can step back (NTP adjustments). Returning the last reading
    instead keeps callers that omit `now` clear of the ledger high-water check.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def now(self) -> int:
        t = int(time.time())
        with self._lock:
            if t > self._last:
                self._last = t
            return self._last


class ManualClock:
    """Clock driven explicitly by the caller. Never goes backwards."""

    def __init__(self, start: int = 0) -> None:
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def set(self, t: int) -> None:
        t = int(t)
        if t < self._now:
            raise ValueError(f"ManualClock cannot move backwards ({t} < {self._now})")
        self._now = t

    def advance(self, seconds: int) -> int:
        seconds = int(seconds)
        if seconds < 0:
            raise ValueError("ManualClock.advance expects seconds >= 0")
        self._now += seconds
        return self._now
