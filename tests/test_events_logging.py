# tests/test_events_logging.py
from __future__ import annotations

import json
import logging

import pytest

from decayledger.ledger import ZERO_ADDRESS, FanoutSink, Ledger, LoggingEventSink, MemoryEventSink, Moved
from decayledger.log import configure_structured_logging, log_event

A = "0x" + "aa" * 20
B = "0x" + "bb" * 20


def _json_lines(caplog: pytest.LogCaptureFixture) -> list[dict]:
    out = []
    for rec in caplog.records:
        try:
            out.append(json.loads(rec.getMessage()))
        except ValueError:
            continue
    return out


def test_log_event_emits_sorted_jsonl_and_stringifies_big_ints(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("decayledger.test")
    with caplog.at_level(logging.INFO, logger="decayledger.test"):
        log_event(logger, "sample", small=5, big=2**200)

    (line,) = _json_lines(caplog)
    assert line["event"] == "sample"
    assert line["small"] == 5
    assert line["big"] == str(2**200)
    assert isinstance(line["ts_ms"], int)


def test_ledger_logs_mutations_and_rejections(caplog: pytest.LogCaptureFixture) -> None:
    led = Ledger(name="Logged", symbol="LOG", decay_rate=1)
    with caplog.at_level(logging.INFO, logger="decayledger.ledger"):
        led.create(A, 10, now=0)
        with pytest.raises(Exception):
            led.move(A, B, 11, now=0)

    events = [(d["event"], d.get("code")) for d in _json_lines(caplog)]
    assert ("ledger_created", None) in events
    assert ("ledger_rejected", "insufficient_balance") in events


def test_logging_sink_and_fanout(caplog: pytest.LogCaptureFixture) -> None:
    mem = MemoryEventSink(maxlen=10)
    sink = FanoutSink([mem, LoggingEventSink(logging.getLogger("decayledger.events"))])

    with caplog.at_level(logging.INFO, logger="decayledger.events"):
        sink(Moved(sender=ZERO_ADDRESS, recipient=A, amount=3))

    assert len(mem) == 1
    (line,) = _json_lines(caplog)
    assert line["event"] == "ledger_event_moved"
    assert line["from"] == ZERO_ADDRESS
    assert line["amount"] == "3"


def test_memory_sink_limit() -> None:
    mem = MemoryEventSink(maxlen=5)
    for i in range(3):
        mem(Moved(sender=A, recipient=B, amount=i))
    assert [e.amount for e in mem.events(2)] == [1, 2]
    assert mem.events(0) == []
    mem.clear()
    assert len(mem) == 0


def test_configure_structured_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    saved = (list(root.handlers), root.level, getattr(root, "_decayledger_configured", False))
    try:
        monkeypatch.setenv("DECAYLEDGER_LOG_LEVEL", "warning")
        configure_structured_logging()
        n = len(root.handlers)
        configure_structured_logging("DEBUG")
        assert len(root.handlers) == n
        assert root.level == logging.DEBUG
    finally:
        root.handlers, root.level = saved[0], saved[1]
        setattr(root, "_decayledger_configured", saved[2])
