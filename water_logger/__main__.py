"""
Run the water level logger API server.

Usage:
    python -m water_logger                  # host/port from settings (.env)
    python -m water_logger --port 8080
"""

from __future__ import annotations

import argparse

import uvicorn

from .core.config import settings


def main() -> None:
    p = argparse.ArgumentParser(description="Water level logger API server")
    p.add_argument("--host", help="Host to bind to (overrides HOST)")
    p.add_argument("--port", type=int, help="Port to bind to (overrides PORT, default 5000)")
    p.add_argument("--reload", action="store_true", help="Enable auto-reload (development only)")
    args = p.parse_args()

    uvicorn.run(
        "water_logger.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
