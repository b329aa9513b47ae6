"""Structured logging for libdiscover, rendered through structlog.

Library code logs through plain ``logging.getLogger(__name__)`` loggers;
``setup_logging`` routes those records through structlog so that request
context bound with ``bind_search_context`` shows up on every line.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from libdiscover.config.settings import ObservabilitySettings

# Chatty third-party loggers kept at WARNING unless we are debugging.
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(settings: ObservabilitySettings | None = None, debug: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Observability settings. Uses defaults if None.
        debug: Force DEBUG level regardless of ``log_level``.
    """
    level_name = "DEBUG" if debug else (settings.log_level.upper() if settings else "INFO")
    renderer_name = settings.log_format if settings else "json"
    level = getattr(logging, level_name, logging.INFO)

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: Any = (
        structlog.dev.ConsoleRenderer() if renderer_name == "console" else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)


def bind_search_context(**values: Any) -> None:
    """Attach per-request values (search type, core, ...) to subsequent log lines."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)
