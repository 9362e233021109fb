# tests/test_registry.py
from __future__ import annotations

import pytest

from decayledger.ledger import ManualClock
from decayledger.registry import LedgerRegistry, RegistryError

A = "0x" + "aa" * 20


def test_ledgers_are_independent() -> None:
    reg = LedgerRegistry(clock=ManualClock(0))
    fast = reg.create("fast", name="Fast", symbol="FST", decay_rate=10).ledger
    slow = reg.create("slow", name="Slow", symbol="SLW", decay_rate=1).ledger

    fast.create(A, 1_000, now=0)
    slow.create(A, 1_000, now=0)

    assert fast.query(A, 50) == 500
    assert slow.query(A, 50) == 950
    assert fast.address != slow.address
    assert reg.ids() == ["fast", "slow"]


def test_duplicate_and_invalid_ids() -> None:
    reg = LedgerRegistry()
    reg.create("main", name="Main", symbol="MN", decay_rate=1)

    with pytest.raises(RegistryError) as e:
        reg.create("MAIN", name="Again", symbol="MN", decay_rate=1)
    assert e.value.code == "ledger_exists"

    with pytest.raises(RegistryError) as e:
        reg.create("bad id!", name="Bad", symbol="B", decay_rate=1)
    assert e.value.code == "invalid_ledger_id"

    with pytest.raises(RegistryError) as e:
        reg.get("missing")
    assert e.value.code == "ledger_not_found"


def test_registry_records_events_per_ledger() -> None:
    reg = LedgerRegistry(event_buffer=2)
    entry = reg.create("ev", name="Events", symbol="EV", decay_rate=0)
    for amt in (1, 2, 3):
        entry.ledger.create(A, amt, now=0)

    got = [e.amount for e in entry.events.events()]
    assert got == [2, 3]
    assert "ev" in reg
    assert len(reg) == 1
