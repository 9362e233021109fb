# src/decayledger/ledger/events.py
from __future__ import annotations

"""Ledger notifications and sinks.

A sink is any callable taking one event. The ledger delivers events before it
commits the corresponding state change; if a sink raises, the operation is
aborted and nothing is applied.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, List, Union

from decayledger.log import log_event


@dataclass(frozen=True)
class Moved:
    """Value moved from `sender` to `recipient`.

    sender == ZERO_ADDRESS marks origination; recipient == ZERO_ADDRESS marks
    destruction.
    """

    sender: str
    recipient: str
    amount: int

    def to_dict(self) -> dict:
        return {"event": "Moved", "from": self.sender, "to": self.recipient, "amount": str(self.amount)}


@dataclass(frozen=True)
class Approved:
    owner: str
    spender: str
    amount: int

    def to_dict(self) -> dict:
        return {"event": "Approved", "owner": self.owner, "spender": self.spender, "amount": str(self.amount)}


LedgerEvent = Union[Moved, Approved]
EventSink = Callable[[LedgerEvent], None]


def null_sink(event: LedgerEvent) -> None:
    return None


class MemoryEventSink:
    """Bounded in-memory event buffer (most recent `maxlen` events)."""

    def __init__(self, maxlen: int = 1000) -> None:
        self._lock = threading.Lock()
        self._events: Deque[LedgerEvent] = deque(maxlen=max(1, int(maxlen)))

    def __call__(self, event: LedgerEvent) -> None:
        with self._lock:
            self._events.append(event)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def events(self, limit: int | None = None) -> List[LedgerEvent]:
        with self._lock:
            out = list(self._events)
        if limit is not None and limit >= 0:
            out = out[-limit:] if limit else []
        return out

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


class LoggingEventSink:
    """Write each event as a JSONL log line."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("decayledger.events")

    def __call__(self, event: LedgerEvent) -> None:
        d = event.to_dict()
        name = d.pop("event")
        log_event(self._logger, f"ledger_event_{name.lower()}", **d)


class FanoutSink:
    """Deliver each event to every sink in order."""

    def __init__(self, sinks: Iterable[EventSink]) -> None:
        self._sinks = list(sinks)

    def __call__(self, event: LedgerEvent) -> None:
        for s in self._sinks:
            s(event)


__all__ = [
    "Approved",
    "EventSink",
    "FanoutSink",
    "LedgerEvent",
    "LoggingEventSink",
    "MemoryEventSink",
    "Moved",
    "null_sink",
]
