"""Structured logging configuration for Fulcrum.

This module configures structlog with support for:
- JSON and console output formats
- File rotation based on size
- One correlation ID per progression operation (single or bulk)
- Application and pipeline context scoped to a block

The logging system integrates structlog with Python's stdlib logging
for handlers (file rotation), while using structlog exclusively for
actual log emission.

Example usage:
    >>> from fulcrum.config import LoggingConfig
    >>> from fulcrum.logging import setup_logging, get_logger, correlation_scope, review_context
    >>>
    >>> setup_logging(LoggingConfig(level="INFO", format="json"))
    >>>
    >>> logger = get_logger(__name__)
    >>> with correlation_scope(), review_context("6f1c...", "developer"):
    ...     logger.info("progress_advanced", stage_index=1)
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
import logging.handlers
import sys
import uuid
from collections.abc import Iterator
from typing import Any

import structlog

from fulcrum.config import LoggingConfig

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def add_correlation_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor copying the active correlation id into the event."""
    correlation_id = _correlation_id.get()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def get_correlation_id() -> str | None:
    """Correlation id of the operation running in this context, if any."""
    return _correlation_id.get()


@contextlib.contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Tag every log line emitted inside the block with one correlation id.

    A nested scope keeps the enclosing id unless one is passed explicitly,
    so every item of a bulk advance logs under the id of the bulk call.

    Args:
        correlation_id: Id to use. A new one is generated when neither this
            nor an enclosing scope provides one.

    Yields:
        The correlation id in effect inside the block.
    """
    scoped = correlation_id or _correlation_id.get() or uuid.uuid4().hex
    token = _correlation_id.set(scoped)
    try:
        yield scoped
    finally:
        _correlation_id.reset(token)


def review_context(
    application_id: str, pipeline_id: str
) -> contextlib.AbstractContextManager[Any]:
    """Bind application and pipeline identifiers to logs emitted in a block.

    The values live in structlog's contextvars and are removed again when
    the block exits, so one application's identifiers never leak onto the
    log lines of the next.

    Example:
        >>> with review_context(str(application.id), "developer"):
        ...     logger.info("progress_advanced", stage_index=1)
    """
    return structlog.contextvars.bound_contextvars(
        application_id=application_id, pipeline_id=pipeline_id
    )


def setup_logging(config: LoggingConfig) -> None:
    """Configure structlog with the given configuration.

    This function sets up the complete logging pipeline including:
    - JSON or console rendering based on config.format
    - File rotation if config.file is specified
    - Timestamp, log level, and logger name processors
    - Correlation ID processor

    Args:
        config: Logging configuration from FulcrumConfig
    """
    log_level = getattr(logging, config.level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    if config.file is not None:
        config.file.parent.mkdir(parents=True, exist_ok=True)

        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            filename=config.file,
            maxBytes=config.rotation_size_mb * 1024 * 1024,
            backupCount=config.retention_count,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler(sys.stdout)

    handler.setLevel(log_level)
    root_logger.addHandler(handler)

    if config.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.contextvars.merge_contextvars,
            add_correlation_id,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)
