from __future__ import annotations

from fastapi import APIRouter, Request

from decayledger import __version__
from decayledger.api.routes_public_parts.common import _registry

router = APIRouter()


@router.get("/health")
def v1_health(request: Request):
    reg = _registry(request)
    return {"ok": True, "version": __version__, "ledgers": len(reg)}
