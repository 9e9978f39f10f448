"""
Runs the standalone API server with uvicorn.

Usage:
    python -m backend.server --port 3000
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from backend.config import get_settings


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the Memory Box API.")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    logging.getLogger(__name__).info(
        "Memory Box API listening on %s:%s", args.host, args.port
    )
    uvicorn.run("backend.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
