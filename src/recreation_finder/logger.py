"""Logging configuration and utilities.

This module sets up the logging configuration for the application and provides
a utility function to get loggers with consistent naming.
"""

import logging
import sys

from pydantic import ValidationError

from .config import LoggingSettings, get_settings


def configure_logging(level: str | None = None, format_string: str | None = None) -> None:
    """Configure logging for the application.

    Arguments passed to the function win over configured settings. Settings that
    cannot be loaded (for example a missing API key) fall back to INFO with the
    default format so that the failure itself can still be logged.

    Args:
        level: Optional logging level (e.g., "DEBUG", "INFO").
        format_string: Optional logging format string.
    """
    try:
        logging_settings = get_settings().logging
    except ValidationError:
        logging_settings = LoggingSettings()

    log_level = level or logging_settings.level
    log_format = format_string or logging_settings.format

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Silence noisy loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("geopy").setLevel(logging.WARNING)

    logging.info("Logging configured with level: %s", log_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: The name of the logger.

    Returns:
        A logger instance.
    """
    return logging.getLogger(name)
