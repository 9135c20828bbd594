"""Command line entry point: load config and serve the proxy with uvicorn."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

import uvicorn

from .app import create_app
from .config_loader import load_config
from .core.exceptions import ConfigurationError
from .logging import setup_logging
from .settings import ProxySettings, ServerSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chathub-proxy",
        description="OpenAI-compatible streaming proxy in front of ChatHub.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the YAML config (default: $CHATHUB_PROXY_CONFIG or configs/config.yaml)",
    )
    parser.add_argument("--host", default=None, help="Bind address override")
    parser.add_argument("--port", type=int, default=None, help="Bind port override")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level override",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # Log config loading itself before the configured level is known
    logging.basicConfig(level=logging.INFO)
    try:
        config = load_config(args.config)
        settings = ProxySettings.from_config(config)
    except ConfigurationError as exc:
        logging.getLogger("chathub-proxy").error(f"Invalid configuration: {exc}")
        return 2

    log_level = args.log_level or settings.log_level
    logger = setup_logging(log_level)

    server = ServerSettings(
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
    )
    logger.info(f"Server starting on {server.host}:{server.port}")
    uvicorn.run(
        create_app(settings),
        host=server.host,
        port=server.port,
        log_level=log_level.lower(),
    )
    logger.info("Server exiting")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
