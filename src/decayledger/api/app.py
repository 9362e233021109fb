from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from decayledger.api.errors import install_error_handlers
from decayledger.api.routes_public import public_router
from decayledger.api.security import RequestSizeLimitMiddleware
from decayledger.config import LedgerConfig, load_config
from decayledger.ledger.clock import Clock
from decayledger.registry import LedgerRegistry


def build_registry(cfg: LedgerConfig, *, clock: Optional[Clock] = None) -> LedgerRegistry:
    """Build the registry and seed the default ledger when one is configured.

    Kept separate so tests can monkeypatch `decayledger.api.app.build_registry`.
    """
    reg = LedgerRegistry(clock=clock, event_buffer=cfg.event_buffer)
    if cfg.default_name:
        reg.create(
            "default",
            name=cfg.default_name,
            symbol=cfg.default_symbol,
            decay_rate=cfg.default_decay_rate,
        )
    return reg


def create_app(
    *,
    cfg: Optional[LedgerConfig] = None,
    registry: Optional[LedgerRegistry] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Create the FastAPI application hosting a LedgerRegistry.

    cfg:      defaults to load_config() (DECAYLEDGER_* env)
    registry: inject a prebuilt registry (tests); otherwise build_registry()
    clock:    time source for requests that omit `now`
    """
    cfg = cfg or load_config()

    # Disable docs in production.
    if cfg.is_prod:
        app = FastAPI(title="Decay Ledger API", docs_url=None, redoc_url=None, openapi_url=None)
    else:
        app = FastAPI(title="Decay Ledger API")

    app.state.cfg = cfg
    app.state.registry = registry if registry is not None else build_registry(cfg, clock=clock)

    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=cfg.max_request_bytes)
    install_error_handlers(app)
    app.include_router(public_router)

    return app
