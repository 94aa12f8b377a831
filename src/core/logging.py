"""Logging and observability configuration using Pydantic Logfire.

All modules use Python's standard logging library (logging.getLogger(__name__));
Logfire captures and enriches these records once configured.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_context(logger, "info", "Task completed", task_id="123", plant_id="abc")
"""

import logging

import logfire
from fastapi import FastAPI

from src.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment.

    Nothing is sent unless a token is present, so local runs stay offline.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name="pflanzen-manager",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def instrument_fastapi(app: FastAPI) -> None:
    """Add Logfire instrumentation to FastAPI application."""
    logfire.instrument_fastapi(app)
    logger = logging.getLogger(__name__)
    logger.info("FastAPI instrumentation configured")


def instrument_pydantic_ai() -> None:
    """Configure automatic tracing for Pydantic AI agent calls."""
    # Spans for agent.run() are created automatically once logfire is configured
    logger = logging.getLogger(__name__)
    logger.info("Pydantic AI instrumentation ready (automatic)")


def span(name: str) -> logfire.LogfireSpan:
    """Create a custom span for service layer functions.

    Usage:
        with span("task_service.toggle_task"):
            ...
    """
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (plant_id, task_id, operation_type, etc.)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)


def log_with_plant_context(
    logger: logging.Logger,
    level: str,
    message: str,
    plant_id: str | None = None,
    **extra: object,
) -> None:
    """Log a message with the plant it concerns.

    Usage:
        log_with_plant_context(logger, "info", "Tasks generated", plant_id="p1", count=3)
    """
    context = {"plant_id": plant_id, **extra} if plant_id else extra
    log_with_context(logger, level, message, **context)
