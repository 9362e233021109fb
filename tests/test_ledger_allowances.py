# tests/test_ledger_allowances.py
from __future__ import annotations

import pytest

from decayledger.ledger import (
    ZERO_ADDRESS,
    Approved,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidSpender,
    Ledger,
    MAX_UINT256,
    MemoryEventSink,
)

OWNER = "0x" + "0a" * 20
SPENDER = "0x" + "0b" * 20
DEST = "0x" + "0c" * 20


def _ledger(sink=None) -> Ledger:
    led = Ledger(name="Allow", symbol="ALW", decay_rate=1, sink=sink)
    led.create(OWNER, 1_000, now=0)
    return led


def test_approve_records_allowance_and_emits_event() -> None:
    sink = MemoryEventSink()
    led = _ledger(sink=sink)
    led.approve(OWNER, SPENDER, 300)

    assert led.allowance(OWNER, SPENDER) == 300
    assert sink.events()[-1] == Approved(owner=OWNER, spender=SPENDER, amount=300)


def test_move_from_spends_allowance() -> None:
    led = _ledger()
    led.approve(OWNER, SPENDER, 300)

    led.move_from(SPENDER, OWNER, DEST, 200, now=100)

    assert led.allowance(OWNER, SPENDER) == 100
    assert led.query(OWNER, 100) == 700
    assert led.query(DEST, 100) == 200


def test_move_from_beyond_allowance_fails_without_side_effects() -> None:
    led = _ledger()
    led.approve(OWNER, SPENDER, 50)
    before = led.snapshot()

    with pytest.raises(InsufficientAllowance):
        led.move_from(SPENDER, OWNER, DEST, 51, now=10)

    assert led.snapshot() == before


def test_move_from_beyond_decayed_balance_keeps_allowance() -> None:
    led = _ledger()
    led.approve(OWNER, SPENDER, MAX_UINT256 - 1)

    with pytest.raises(InsufficientBalance):
        led.move_from(SPENDER, OWNER, DEST, 950, now=100)

    assert led.allowance(OWNER, SPENDER) == MAX_UINT256 - 1


def test_unlimited_allowance_is_not_decremented() -> None:
    led = _ledger()
    led.approve(OWNER, SPENDER, MAX_UINT256)
    led.move_from(SPENDER, OWNER, DEST, 10, now=0)
    assert led.allowance(OWNER, SPENDER) == MAX_UINT256


def test_approve_zero_spender_rejected() -> None:
    led = _ledger()
    with pytest.raises(InvalidSpender):
        led.approve(OWNER, ZERO_ADDRESS, 1)


def test_approve_zero_clears_allowance() -> None:
    led = _ledger()
    led.approve(OWNER, SPENDER, 5)
    led.approve(OWNER, SPENDER, 0)
    assert led.allowance(OWNER, SPENDER) == 0
    assert led.snapshot()["allowances"] == {}
