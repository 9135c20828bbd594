"""Logging configuration for the proxy."""

import logging
import sys
from typing import Union

LOGGER_NAME = "chathub-proxy"


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Set up logging with proper handlers and formatters."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Propagate so pytest's caplog and uvicorn's root handlers still see records
    logger.propagate = True

    return logger


def mask_headers(headers) -> dict[str, str]:
    """Copy of ``headers`` that is safe to log."""
    masked: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in {"cookie", "authorization", "set-cookie"}:
            masked[key] = "***"
        else:
            masked[key] = value
    return masked
