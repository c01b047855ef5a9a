"""Command line entrypoint: load a bridge document and serve it."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from bridges.bridge.client import HTTPCaller
from bridges.bridge.errors import BridgeError
from bridges.bridge.loader import load_bridges
from bridges.core.config import Settings
from bridges.web.app import create_app

logger = logging.getLogger("bridges")


def parse_args(argv: list[str] | None = None, settings: Settings | None = None) -> argparse.Namespace:
    settings = settings or Settings()
    parser = argparse.ArgumentParser(
        prog="bridges",
        description="Serve JSON-declared HTTP bridges, one path per bridge.",
    )
    parser.add_argument(
        "-b",
        "--bridge",
        default=settings.bridge,
        help="Filepath/URL of bridge JSON file (default: $BRIDGE).",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=settings.port,
        help="Server port (default: %(default)s).",
    )
    parser.add_argument("--host", default=settings.host, help="Bind address.")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    settings = Settings()
    args = parse_args(argv, settings)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = settings.model_copy(
        update={"bridge": args.bridge, "port": args.port, "host": args.host}
    )
    try:
        bridges = load_bridges(
            settings.bridge,
            caller=HTTPCaller(timeout_seconds=settings.timeout_seconds),
            timeout_seconds=settings.timeout_seconds,
        )
        app = create_app(settings=settings, bridges=bridges)
    except BridgeError as exc:
        logger.critical("Failed to load bridge: %s", exc)
        sys.exit(1)

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
