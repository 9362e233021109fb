from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request

from decayledger.api.routes_public_parts.common import Json, _entry
from decayledger.api.schemas import (
    ApproveRequest,
    CreateRequest,
    DestroyRequest,
    MoveFromRequest,
    MoveRequest,
    UpdateRequest,
)
from decayledger.ledger.address import normalize_holder

router = APIRouter()


@router.get("/ledgers/{ledger_id}/balances/{holder}")
def v1_balance(ledger_id: str, holder: str, request: Request, at: Optional[int] = Query(default=None, ge=0)) -> Json:
    """Live decayed balance. Read-only: never settles decay into storage."""
    led = _entry(request, ledger_id).ledger
    h = normalize_holder(holder)
    return {"ok": True, "holder": h, "balance": str(led.query(h, at))}


@router.get("/ledgers/{ledger_id}/allowances/{owner}/{spender}")
def v1_allowance(ledger_id: str, owner: str, spender: str, request: Request) -> Json:
    led = _entry(request, ledger_id).ledger
    return {"ok": True, "allowance": str(led.allowance(owner, spender))}


@router.post("/ledgers/{ledger_id}/update")
def v1_update(ledger_id: str, body: UpdateRequest, request: Request) -> Json:
    led = _entry(request, ledger_id).ledger
    h = normalize_holder(body.holder)
    return {"ok": True, "holder": h, "balance": str(led.update(h, body.now))}


@router.post("/ledgers/{ledger_id}/move")
def v1_move(ledger_id: str, body: MoveRequest, request: Request) -> Json:
    led = _entry(request, ledger_id).ledger
    led.move(body.sender, body.to, body.amount, body.now)
    return {"ok": True}


@router.post("/ledgers/{ledger_id}/create")
def v1_create(ledger_id: str, body: CreateRequest, request: Request) -> Json:
    led = _entry(request, ledger_id).ledger
    led.create(body.to, body.amount, body.now)
    return {"ok": True, "total_raw": str(led.total_raw)}


@router.post("/ledgers/{ledger_id}/destroy")
def v1_destroy(ledger_id: str, body: DestroyRequest, request: Request) -> Json:
    led = _entry(request, ledger_id).ledger
    led.destroy(body.holder, body.amount, body.now)
    return {"ok": True, "total_raw": str(led.total_raw)}


@router.post("/ledgers/{ledger_id}/approve")
def v1_approve(ledger_id: str, body: ApproveRequest, request: Request) -> Json:
    led = _entry(request, ledger_id).ledger
    led.approve(body.owner, body.spender, body.amount)
    return {"ok": True}


@router.post("/ledgers/{ledger_id}/move_from")
def v1_move_from(ledger_id: str, body: MoveFromRequest, request: Request) -> Json:
    led = _entry(request, ledger_id).ledger
    led.move_from(body.spender, body.sender, body.to, body.amount, body.now)
    return {"ok": True}
