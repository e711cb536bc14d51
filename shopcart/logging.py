"""
Logging for shopcart.

shopcart runs inside a client application, so it only configures its own
"shopcart" logger, and only attaches a handler when the host app has not
configured logging itself.

Usage:
    from shopcart.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart saved")
    logger.error("Failed to save cart", exc_info=True)
"""

import logging
import os
import sys
from functools import cache

PACKAGE_LOGGER = "shopcart"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Supabase user ids are UUIDs; the first group is enough to tell sessions apart
LOGGED_ID_LENGTH = 8


def _get_log_level() -> int:
    """SHOPCART_LOG_LEVEL, then LOG_LEVEL, then INFO."""
    level_name = (os.environ.get("SHOPCART_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure_package_logger() -> None:
    """Set the shopcart level and, for bare hosts, a stdout handler (once)."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(_get_log_level())

    if package_logger.handlers or logging.getLogger().handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    is_production = os.environ.get("SHOPCART_ENV") == "production"
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if is_production else LOG_FORMAT))
    package_logger.addHandler(handler)

    # Supabase and Upstash both talk over httpx; one line per request is noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


_configure_package_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the given name.

    Args:
        name: Logger name (typically __name__, so it sits under "shopcart")

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Shorten a user or order id for logging.

    Control characters are escaped first (ids from auth events and stream
    entries are not trusted), then the id is cut to LOGGED_ID_LENGTH.

    Returns:
        Sanitized id or "N/A" if empty
    """
    if not id_value:
        return "N/A"
    safe_value = (
        str(id_value)
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )
    return safe_value[:LOGGED_ID_LENGTH]


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "PACKAGE_LOGGER",
    "get_logger",
    "sanitize_id_for_logging",
]
