"""
Structured logging configuration for the benefit engine.

Sets up structlog on top of stdlib logging with JSON formatting for log
aggregation tools, or human-readable console output during development.

Usage:
    from ss_engine.core.logging_config import setup_logging, get_logger

    # Once, at process startup (CLI, worker, web app embedding the engine)
    setup_logging()

    # In your code
    logger = get_logger(__name__)
    logger.info("benefit_estimate", birth_year=1970, pia="2280.92")
"""

import logging
import sys
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger

from ss_engine.config import Settings, settings as default_settings


def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Configure structured logging for the engine.

    Engine modules log through ``logging.getLogger(__name__)``; this routes
    those records and structlog events through one formatter.
    In production, logs are JSON formatted for easy parsing by monitoring tools.
    In development, logs are human-readable text.
    """
    config = config or default_settings
    use_json = config.LOG_FORMAT == "json" or config.ENVIRONMENT == "production"
    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if use_json:
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    processors = [
        # Add context
        structlog.contextvars.merge_contextvars,
        # Add log level
        structlog.stdlib.add_log_level,
        # Add logger name
        structlog.stdlib.add_logger_name,
        # Add timestamp
        structlog.processors.TimeStamper(fmt="iso"),
        # Add stack info
        structlog.processors.StackInfoRenderer(),
        # Format exceptions
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Structured logger with context support

    Example:
        >>> from ss_engine.core.logging_config import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("claiming_age_selected", age=70, present_value="512345.67")
    """
    return structlog.get_logger(name)


def log_calculation(
    logger: structlog.stdlib.BoundLogger,
    calculation: str,
    duration_ms: float,
    **kwargs,
) -> None:
    """Log a completed engine calculation with structured data."""
    logger.info(
        "ss_calculation",
        calculation=calculation,
        duration_ms=duration_ms,
        **kwargs,
    )
