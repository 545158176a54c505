"""
structlog setup shared by every docvault module.

Usage:
    from docvault.core.logging import get_logger, setup_logging

    setup_logging("DEBUG")   # once, at application startup
    logger = get_logger(__name__)
    logger.info("Document created", collection="users", id=doc_id)
"""

from __future__ import annotations

import logging
import sys

import structlog

from docvault.core.config import settings


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configure structlog and the stdlib logging bridge.

    Args:
        level: Log level name. Defaults to settings.LOG_LEVEL.
        json_logs: Render JSON lines instead of the console renderer.
                   Defaults to settings.LOG_JSON.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    use_json = settings.LOG_JSON if json_logs is None else json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to `name`."""
    return structlog.get_logger(name)
