# tests/test_ledger_concurrency.py
from __future__ import annotations

import threading
import time

from decayledger.ledger import Ledger, LedgerError


def test_concurrent_moves_never_break_supply() -> None:
    """Many threads shuffle value between holders at a fixed instant.

    With no time passing there is no decay, so the total must be exactly
    preserved and total_raw must always equal the sum of stored records.
    """
    holders = ["0x" + format(i, "040x") for i in range(1, 6)]
    led = Ledger(name="Conc", symbol="CNC", decay_rate=1)
    for h in holders:
        led.create(h, 10_000, now=0)

    errors: list[BaseException] = []

    def worker(seed: int) -> None:
        try:
            for i in range(400):
                src = holders[(seed + i) % len(holders)]
                dst = holders[(seed * 7 + i * 3) % len(holders)]
                try:
                    led.move(src, dst, (i % 17) + 1, now=0)
                except LedgerError as e:
                    assert e.code == "insufficient_balance"
        except BaseException as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(30)

    assert errors == []
    assert led.total_raw == 50_000
    assert led.total_supply(0) == 50_000
    assert sum(led.record(h).raw_amount for h in holders) == 50_000


def test_concurrent_creates_are_serialized() -> None:
    led = Ledger(name="Mint", symbol="MNT", decay_rate=0)
    target = "0x" + "ee" * 20

    def worker() -> None:
        for _ in range(500):
            led.create(target, 1, now=0)

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(30)

    assert led.query(target, 0) == 3_000
    assert led.total_raw == 3_000


class _GatedClock:
    """First reading blocks until released; later readings are one second on."""

    def __init__(self) -> None:
        self.entered = threading.Event()
        self.release = threading.Event()
        self._lock = threading.Lock()
        self._calls = 0

    def now(self) -> int:
        with self._lock:
            self._calls += 1
            first = self._calls == 1
        if first:
            self.entered.set()
            self.release.wait(5)
            return 5
        return 6


def test_clock_read_under_lock_keeps_concurrent_writers_ordered() -> None:
    """A writer stalled on the clock must not let a later reading commit first.

    If the clock were read before taking the ledger lock, the second writer
    would commit t=6 and the stalled first writer would then be rejected
    with clock_regression when it finally commits t=5.
    """
    clock = _GatedClock()
    led = Ledger(name="Clk", symbol="CLK", decay_rate=0, clock=clock)
    a = "0x" + "a1" * 20
    b = "0x" + "b2" * 20
    errors: list[BaseException] = []

    def worker(holder: str) -> None:
        try:
            led.create(holder, 1)
        except BaseException as e:
            errors.append(e)

    ta = threading.Thread(target=worker, args=(a,))
    tb = threading.Thread(target=worker, args=(b,))
    ta.start()
    assert clock.entered.wait(5)
    tb.start()
    time.sleep(0.05)
    clock.release.set()
    ta.join(10)
    tb.join(10)

    assert errors == []
    assert led.query(a, 6) == 1
    assert led.query(b, 6) == 1
    assert led.clock_high_water == 6
