from __future__ import annotations

from fastapi import APIRouter

from decayledger.api.routes_public_parts.balances import router as balances_router
from decayledger.api.routes_public_parts.health import router as health_router
from decayledger.api.routes_public_parts.ledgers import router as ledgers_router

public_router = APIRouter()

public_router.include_router(health_router, prefix="/v1", tags=["health"])
public_router.include_router(ledgers_router, prefix="/v1", tags=["ledgers"])
public_router.include_router(balances_router, prefix="/v1", tags=["balances"])
