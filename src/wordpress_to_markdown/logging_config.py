"""Logging configuration for the converter."""

import logging
import sys
from pathlib import Path

from wordpress_to_markdown.config import Settings

PACKAGE_LOGGER = "wordpress_to_markdown"

# httpx logs one INFO line per request; httpcore logs connection details at DEBUG
HTTP_LOGGERS = ("httpx", "httpcore")


def setup_logging(settings: Settings, verbose: bool = False) -> None:
    """Configure logging based on settings.

    The package logger and the HTTP client loggers share the same handlers.
    Request logs from httpx are shown only in verbose mode.

    Args:
        settings: Application settings containing logging config.
        verbose: If True, override level to DEBUG and show request logs.
    """
    log_settings = settings.logging

    # Determine log level
    level_str = "DEBUG" if verbose else log_settings.level
    level = getattr(logging, level_str.upper(), logging.INFO)

    handlers = _build_handlers(settings, level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    _attach(logger, handlers, level)

    # Requests are listed with -v; otherwise only HTTP client warnings get through
    http_level = logging.INFO if verbose else logging.WARNING
    for name in HTTP_LOGGERS:
        _attach(logging.getLogger(name), handlers, http_level)


def _build_handlers(settings: Settings, level: int) -> list[logging.Handler]:
    """Create the console handler and, if configured, the file handler."""
    formatter = logging.Formatter(settings.logging.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    if settings.logging.file:
        log_path = Path(settings.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


def _attach(logger: logging.Logger, handlers: list[logging.Handler], level: int) -> None:
    """Set a logger's level and replace its handlers."""
    logger.setLevel(level)
    logger.handlers.clear()
    for handler in handlers:
        logger.addHandler(handler)
