from __future__ import annotations

from typing import Any, Dict

from fastapi import Request

from decayledger.api.errors import ApiError
from decayledger.registry import LedgerEntry, LedgerRegistry

Json = Dict[str, Any]


def _registry(request: Request) -> LedgerRegistry:
    reg = getattr(request.app.state, "registry", None)
    if reg is None:
        raise ApiError.internal("not_ready", "registry not attached to app.state", {})
    return reg


def _entry(request: Request, ledger_id: str) -> LedgerEntry:
    return _registry(request).get(ledger_id)


def _ledger_summary(entry: LedgerEntry) -> Json:
    led = entry.ledger
    return {
        "ledger_id": entry.ledger_id,
        "name": led.name,
        "symbol": led.symbol,
        "decimals": led.decimals,
        "decay_rate": str(led.decay_rate),
        "address": led.address,
    }
