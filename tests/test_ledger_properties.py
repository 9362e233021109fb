# tests/test_ledger_properties.py
from __future__ import annotations

import random

from decayledger.ledger import Ledger

A = "0x" + "01" * 20
B = "0x" + "02" * 20


def _ledger(rate: int = 3) -> Ledger:
    return Ledger(name="Props", symbol="PRP", decay_rate=rate)


def test_balance_never_negative() -> None:
    led = _ledger(rate=7)
    led.create(A, 50, now=0)
    for t in (0, 1, 7, 8, 1_000, 10**12):
        assert led.query(A, t) >= 0
    assert led.query(A, 10**12) == 0


def test_decay_is_monotone_non_increasing() -> None:
    led = _ledger(rate=5)
    led.create(A, 10_000, now=10)
    prev = led.query(A, 10)
    for t in range(11, 2_100, 37):
        cur = led.query(A, t)
        assert cur <= prev
        prev = cur


def test_update_twice_at_same_instant_is_idempotent() -> None:
    led = _ledger()
    led.create(A, 1_000, now=0)

    first = led.update(A, 40)
    rec1 = led.record(A)
    second = led.update(A, 40)
    rec2 = led.record(A)

    assert first == second == 880
    assert rec1 == rec2
    assert led.total_raw == 880


def test_move_conserves_supply_after_decay() -> None:
    led = _ledger(rate=2)
    led.create(A, 1_000, now=0)
    led.create(B, 300, now=0)

    t = 50
    before = led.query(A, t) + led.query(B, t)
    led.move(A, B, 123, now=t)
    after = led.query(A, t) + led.query(B, t)

    assert before == after == 1_100
    assert led.total_supply(t) == 1_100
    assert led.total_raw == 1_100


def test_create_increases_total_by_exact_amount_after_settling_recipient() -> None:
    led = _ledger(rate=1)
    led.create(A, 500, now=0)
    led.create(B, 500, now=0)

    # B's settlement at t=100 removes 100; A is not touched by create(B).
    led.create(B, 250, now=100)
    assert led.total_raw == 500 + (500 - 100) + 250
    assert led.query(B, 100) == 650


def test_decay_exactly_equal_to_balance_is_zero() -> None:
    led = _ledger(rate=4)
    led.create(A, 400, now=0)
    assert led.query(A, 100) == 0
    assert led.update(A, 100) == 0
    assert led.total_raw == 0


def test_unknown_holder_reads_zero() -> None:
    led = _ledger()
    assert led.query("0x" + "99" * 20, 123) == 0
    assert led.record("0x" + "99" * 20) is None


def test_self_move_only_refreshes_decay() -> None:
    led = _ledger(rate=1)
    led.create(A, 100, now=0)
    led.move(A, A, 60, now=10)
    rec = led.record(A)
    assert rec is not None
    assert (rec.raw_amount, rec.last_updated) == (90, 10)
    assert led.total_raw == 90


def test_total_raw_tracks_sum_of_records_under_random_workload() -> None:
    rng = random.Random(1234)
    holders = ["0x" + format(i, "040x") for i in range(1, 9)]
    led = _ledger(rate=1)
    t = 0
    for _ in range(400):
        t += rng.randint(0, 5)
        op = rng.random()
        h = rng.choice(holders)
        if op < 0.3:
            led.create(h, rng.randint(0, 500), now=t)
        elif op < 0.8:
            to = rng.choice(holders)
            bal = led.query(h, t)
            led.move(h, to, rng.randint(0, bal), now=t)
        else:
            led.update(h, t)

        raw_sum = sum(led.record(x).raw_amount for x in led.holders())
        assert led.total_raw == raw_sum

    assert led.settle_all(t) == led.total_supply(t)
