from __future__ import annotations

import asyncio
import logging
import os
import sys

import uvicorn

# Install uvloop for better async performance (Linux/macOS only)
if sys.platform != "win32":
    try:
        import uvloop

        asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
    except ImportError:
        pass  # uvloop not available, continue with default event loop

from .domain.errors import ConfigurationError
from .env import get_settings


def _setup_prometheus_multiproc_dir() -> None:
    """Prepare the Prometheus multiprocess directory before Uvicorn starts."""
    prom_dir = os.environ.get("PROMETHEUS_MULTIPROC_DIR")
    if not prom_dir:
        return

    os.makedirs(prom_dir, exist_ok=True)
    for filename in os.listdir(prom_dir):
        file_path = os.path.join(prom_dir, filename)
        if os.path.isfile(file_path):
            os.remove(file_path)


def main() -> None:
    """Main entry point for the redistribution agent."""
    logging.basicConfig(
        level=logging.DEBUG if os.environ.get("API_DEBUG") == "true" else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = get_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    print(f"Starting {settings.app_name} v{settings.app_version}")
    print(f"Monitoring account {settings.account} on chain {settings.chain}")
    print(f"Distributing every {settings.frequency} blocks")
    print(f"Ledger: {settings.ledger_base_url}")
    print(f"API will be available at: http://{settings.api_host}:{settings.api_port}")

    _setup_prometheus_multiproc_dir()

    # Single worker: the redistribution service must be the only cycle runner.
    uvicorn.run(
        "allforone.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
        workers=1,
        log_level="info",
    )


if __name__ == "__main__":
    main()
