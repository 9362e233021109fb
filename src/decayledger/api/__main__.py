# src/decayledger/api/__main__.py
from __future__ import annotations

import uvicorn

from decayledger.env import load_dotenv_if_present


def main() -> None:
    # Load .env early so DECAYLEDGER_* vars exist before anything reads them.
    load_dotenv_if_present()

    # Import after dotenv load (prevents "config read before env" surprises)
    from decayledger.api.app import create_app
    from decayledger.config import load_config
    from decayledger.log import configure_structured_logging

    cfg = load_config()
    configure_structured_logging(cfg.log_level)

    uvicorn.run(create_app(cfg=cfg), host=cfg.api_host, port=cfg.api_port, log_level="info")


if __name__ == "__main__":
    main()
