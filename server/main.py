"""
crypto portal server — process entry point

Serves server-rendered crypto news, coin info and price pages built from
newsdata.io and CoinMarketCap.

Usage:
    cd server
    python main.py                          # listen on PORTAL_HOST:PORTAL_PORT (127.0.0.1:8080)
    python main.py --host 0.0.0.0 --port 9000
    python main.py --log-level DEBUG

Requires NEWSDATA_API_KEY and CMC_API_KEY in the environment or .env.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import replace

from dotenv import load_dotenv

from crypto_portal.config import ConfigurationError, Settings, load_settings
from crypto_portal.web import serve

logger = logging.getLogger("crypto_portal")


async def run(settings: Settings) -> None:
    shutdown_event = asyncio.Event()

    def signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    await serve(settings, shutdown_event)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="crypto portal server")
    parser.add_argument("--host", help="Override PORTAL_HOST")
    parser.add_argument("--port", type=int, help="Override PORTAL_PORT")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Root log level (default: INFO)",
    )
    return parser.parse_args(argv)


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Replace the listener host and port with any given on the command line."""
    http_server = settings.http_server
    if args.host is not None:
        http_server = replace(http_server, host=args.host)
    if args.port is not None:
        http_server = replace(http_server, port=args.port)
    return replace(settings, http_server=http_server)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    load_dotenv(".env")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = apply_cli_overrides(load_settings(), args)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    asyncio.run(run(settings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
