"""Structured logging setup for condeval.

The library only emits events through ``structlog.get_logger(__name__)``;
it never configures logging on import. Host applications that want the
condeval defaults call ``configure_logging()`` once at startup.
"""

from __future__ import annotations

import logging
import sys

import structlog

from .settings import get_settings


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Log level name. Defaults to ``CondEvalSettings.log_level``.
        json: Render JSON lines when ``True``, human-readable console output
            when ``False``. Defaults to ``CondEvalSettings.log_json``.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    json = settings.log_json if json is None else json

    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level),
    )
