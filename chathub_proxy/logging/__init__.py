"""Logging module for the proxy."""

from .setup import LOGGER_NAME, mask_headers, setup_logging

__all__ = [
    "LOGGER_NAME",
    "mask_headers",
    "setup_logging",
]
