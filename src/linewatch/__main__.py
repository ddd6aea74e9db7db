"""Run the LineWatch server.

Usage
-----
    python -m linewatch
    python -m linewatch --port 8080 --verbose
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

from aiohttp import web

from linewatch.config import LinewatchConfig
from linewatch.web.app import create_app


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Serve the LineWatch ingestion endpoint, REST commands and realtime websocket.",
    )
    parser.add_argument("--host", help="Interface to bind (default: LINEWATCH_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: LINEWATCH_PORT or 9002)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    overrides: dict[str, Any] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    config = LinewatchConfig.from_env(**overrides)

    web.run_app(create_app(config), host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()
