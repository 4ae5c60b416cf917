"""
structlog setup for the PolicyScan agent.

Loggers returned by get_logger() are lazy proxies, so modules can create them
at import time and still pick up the configuration applied later by
configure_logging() (called once Settings are loaded). Log calls take the
event type first and context as keywords:

    logger.error("engine_http_error", engine="talos", url=url, status_code=503)
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def _renderer(fmt: str) -> Any:
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.processors.JSONRenderer(default=str)


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Apply level and output format (json | console). Safe to call again."""
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        level_value = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("event_type"),
            _renderer(fmt.strip().lower()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Reconfiguration (settings load, log capture in tests) must reach existing loggers.
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    return structlog.get_logger(logger=name)
