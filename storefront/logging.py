"""
Centralized logging configuration for the storefront.

Usage:
    from storefront.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart loaded")
    logger.error("Failed to persist cart", exc_info=True)

Environment:
    LOG_LEVEL             root level (default INFO)
    STOREFRONT_LOG_LEVEL  level for storefront.* loggers (default: root level)
    VERCEL=1              compact format without timestamps
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s %(name)s: %(message)s"

# Package logger; STOREFRONT_LOG_LEVEL tunes it independently of the root level
PACKAGE_LOGGER = "storefront"

# Third-party loggers that log every storage round-trip at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "upstash_redis")


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Level name ("debug", "WARNING") or number to a logging level; unknown names give `default`."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def configure_logging(
    level: str | int | None = None,
    package_level: str | int | None = None,
    stream=None,
) -> None:
    """
    Set up the root handler and the storefront package level.

    The root handler is only installed when the root logger has none, so a host
    application's logging setup wins. The package level is applied every call.

    Args:
        level: Root level (default: LOG_LEVEL env var, then INFO)
        package_level: Level for `storefront.*` (default: STOREFRONT_LOG_LEVEL, then the root level)
        stream: Handler stream (default: stdout)
    """
    root_level = parse_level(level if level is not None else os.environ.get("LOG_LEVEL"))
    root = logging.getLogger()

    if not root.handlers:
        root.setLevel(root_level)
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        # Serverless log collectors add their own timestamps
        is_production = os.environ.get("VERCEL") == "1"
        handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if is_production else LOG_FORMAT))
        root.addHandler(handler)

    if package_level is None:
        package_level = os.environ.get("STOREFRONT_LOG_LEVEL")
    logging.getLogger(PACKAGE_LOGGER).setLevel(parse_level(package_level, default=root_level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """
    Escape characters that could be used for log injection attacks (CWE-117).

    Args:
        value: String to escape

    Returns:
        Escaped string safe for logging
    """
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | int | None, max_length: int = 32) -> str:
    """
    Sanitize a product/item id before logging it.

    Item ids come from the client, so they are escaped and truncated.

    Args:
        id_value: ID value to sanitize (can be None)
        max_length: Maximum length to keep

    Returns:
        Sanitized ID string or "N/A" if empty
    """
    if id_value is None or id_value == "":
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "NOISY_LOGGERS",
    "PACKAGE_LOGGER",
    "configure_logging",
    "get_logger",
    "parse_level",
    "sanitize_id_for_logging",
]
