# src/decayledger/registry.py
from __future__ import annotations

"""In-process registry of independent ledgers.

Each Ledger carries its own lock, so mutations on different ledgers never
contend; the registry lock only guards the id -> ledger map itself.
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from decayledger.ledger.address import derive_ledger_address
from decayledger.ledger.clock import Clock
from decayledger.ledger.core import Ledger
from decayledger.ledger.decay import DecayModel
from decayledger.ledger.events import FanoutSink, LoggingEventSink, MemoryEventSink
from decayledger.log import log_event

_ID_RE = re.compile(r"^[a-z0-9][a-z0-9_-]{0,63}$")


@dataclass(eq=False)
class RegistryError(Exception):
    code: str
    reason: str

    def __str__(self) -> str:
        return f"{self.code}:{self.reason}"


@dataclass(frozen=True)
class LedgerEntry:
    ledger_id: str
    ledger: Ledger
    events: MemoryEventSink


class LedgerRegistry:
    def __init__(self, *, clock: Optional[Clock] = None, event_buffer: int = 1000) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, LedgerEntry] = {}
        self._clock = clock
        self._event_buffer = int(event_buffer)
        self._logger = logging.getLogger("decayledger.registry")

    def create(
        self,
        ledger_id: str,
        *,
        name: str,
        symbol: str,
        decay_rate: int,
        decay_model: Optional[DecayModel] = None,
    ) -> LedgerEntry:
        lid = str(ledger_id or "").strip().lower()
        if not _ID_RE.match(lid):
            raise RegistryError("invalid_ledger_id", "ledger_id must match [a-z0-9][a-z0-9_-]{0,63}")

        with self._lock:
            if lid in self._entries:
                raise RegistryError("ledger_exists", lid)
            events = MemoryEventSink(maxlen=self._event_buffer)
            ledger = Ledger(
                name=name,
                symbol=symbol,
                decay_rate=decay_rate,
                decay_model=decay_model,
                clock=self._clock,
                sink=FanoutSink([events, LoggingEventSink()]),
                address=derive_ledger_address(lid),
                logger=logging.getLogger(f"decayledger.ledger.{lid}"),
            )
            entry = LedgerEntry(ledger_id=lid, ledger=ledger, events=events)
            self._entries[lid] = entry

        log_event(self._logger, "ledger_registered", ledger_id=lid, name=name, decay_rate=decay_rate)
        return entry

    def get(self, ledger_id: str) -> LedgerEntry:
        lid = str(ledger_id or "").strip().lower()
        with self._lock:
            entry = self._entries.get(lid)
        if entry is None:
            raise RegistryError("ledger_not_found", lid)
        return entry

    def ids(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)

    def __contains__(self, ledger_id: object) -> bool:
        with self._lock:
            return str(ledger_id).strip().lower() in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
