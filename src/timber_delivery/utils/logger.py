"""
Module: logger.py
Description: Structured logging configuration for Timber delivery.

Configures structlog for JSON output so delivery failures can be
shipped and searched alongside the host framework's own logs.

Key Components:
- JSON output with ISO 8601 UTC timestamps
- Log level filtering driven by DeliverySettings.log_level
- Exception/stack trace rendering for fatal delivery errors
- get_logger() helper function

Dependencies: structlog, logging
"""

import logging

import structlog

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog for JSON output.

    Safe to call more than once; the latest call wins.

    Args:
        log_level: Minimum level to emit (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Raises:
        ValueError: If log_level is not a known level name
    """
    level = _LEVELS.get(log_level.upper())
    if level is None:
        raise ValueError(f"log_level must be one of: {', '.join(_LEVELS)}")

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            # Renders exc_info passed by fatal error logs
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.WriteLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        # Loggers must pick up reconfiguration after settings load
        cache_logger_on_first_use=False,
    )


configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warning("Bad retryable response from the Timber API", attempt=1, code=503)
        {"attempt": 1, "code": 503, "event": "Bad retryable response from the Timber API", "timestamp": "2024-01-15T10:30:00.000000Z", "level": "warning"}
    """
    return structlog.get_logger(name)
