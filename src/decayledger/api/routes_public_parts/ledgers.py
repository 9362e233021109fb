from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request

from decayledger.api.routes_public_parts.common import Json, _entry, _ledger_summary, _registry
from decayledger.api.schemas import LedgerCreateRequest

router = APIRouter()


@router.get("/ledgers")
def v1_ledgers_list(request: Request) -> Json:
    reg = _registry(request)
    return {"ok": True, "ledgers": [_ledger_summary(reg.get(lid)) for lid in reg.ids()]}


@router.post("/ledgers")
def v1_ledgers_create(body: LedgerCreateRequest, request: Request) -> Json:
    entry = _registry(request).create(
        body.ledger_id,
        name=body.name,
        symbol=body.symbol,
        decay_rate=body.decay_rate,
    )
    return {"ok": True, "ledger": _ledger_summary(entry)}


@router.get("/ledgers/{ledger_id}")
def v1_ledger_get(ledger_id: str, request: Request, at: Optional[int] = Query(default=None, ge=0)) -> Json:
    """Ledger metadata plus the stored total and the live supply at `at`."""
    entry = _entry(request, ledger_id)
    led = entry.ledger
    out = _ledger_summary(entry)
    out["total_raw"] = str(led.total_raw)
    out["total_supply"] = str(led.total_supply(at))
    out["holders"] = len(led.holders())
    return {"ok": True, "ledger": out}


@router.get("/ledgers/{ledger_id}/events")
def v1_ledger_events(
    ledger_id: str,
    request: Request,
    limit: int = Query(default=100, ge=0, le=1000),
) -> Json:
    entry = _entry(request, ledger_id)
    return {"ok": True, "events": [e.to_dict() for e in entry.events.events(limit)]}


@router.get("/ledgers/{ledger_id}/snapshot")
def v1_ledger_snapshot(ledger_id: str, request: Request) -> Json:
    return {"ok": True, "snapshot": _entry(request, ledger_id).ledger.snapshot()}
