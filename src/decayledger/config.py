# src/decayledger/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return int(default)
    try:
        v = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from e
    if v < minimum:
        raise ValueError(f"{name} must be >= {minimum} (got {v})")
    return v


@dataclass(frozen=True)
class LedgerConfig:
    mode: str  # "prod" | "dev"
    log_level: str
    default_name: Optional[str]
    default_symbol: str
    default_decay_rate: int
    event_buffer: int
    max_request_bytes: int
    api_host: str
    api_port: int

    @property
    def is_prod(self) -> bool:
        return self.mode == "prod"


def load_config() -> LedgerConfig:
    """Read DECAYLEDGER_* environment variables.

    Invalid numeric values raise ValueError (fail closed at startup rather
    than silently running with a different decay rate).
    """
    mode = (os.getenv("DECAYLEDGER_MODE") or "prod").strip().lower()
    if mode not in {"prod", "dev"}:
        mode = "prod"

    name = (os.getenv("DECAYLEDGER_DEFAULT_NAME") or "").strip() or None

    return LedgerConfig(
        mode=mode,
        log_level=(os.getenv("DECAYLEDGER_LOG_LEVEL") or "INFO").strip().upper(),
        default_name=name,
        default_symbol=(os.getenv("DECAYLEDGER_DEFAULT_SYMBOL") or "DCY").strip(),
        default_decay_rate=_env_int("DECAYLEDGER_DEFAULT_DECAY_RATE", 0),
        event_buffer=_env_int("DECAYLEDGER_EVENT_BUFFER", 1000, minimum=1),
        max_request_bytes=_env_int("DECAYLEDGER_MAX_REQUEST_BYTES", 64 * 1024, minimum=1),
        api_host=(os.getenv("DECAYLEDGER_API_HOST") or "127.0.0.1").strip(),
        api_port=_env_int("DECAYLEDGER_API_PORT", 8080, minimum=1),
    )
