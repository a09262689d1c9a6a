"""Structured logging for Canopy.

structlog is configured once, at CLI or app startup, and routes both
structlog loggers and plain stdlib loggers through the same processor chain:

- pretty console output by default
- JSON lines when ``CANOPY_LOG_FORMAT=json``
- level taken from ``CANOPY_LOG_LEVEL`` unless passed explicitly

Usage:
    from canopy.logging import configure_logging, get_logger

    configure_logging()
    log = get_logger(__name__).bind(tree="inventory")
    log.debug("tree_expanded", key="1", expanded_count=3)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
]

LOG_FORMAT_ENV_VAR = "CANOPY_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "CANOPY_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _level_from_env() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _json_requested() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _shared_processors() -> list[Processor]:
    """Processors applied to both structlog and foreign (stdlib) records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(use_json: bool) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Calling it again replaces the previous configuration, which is what the
    CLI does after it has resolved ``--verbose``/``--quiet``.

    Args:
        force_json: Emit JSON regardless of ``CANOPY_LOG_FORMAT``.
        level: Explicit level; falls back to ``CANOPY_LOG_LEVEL``.
    """
    use_json = force_json or _json_requested()
    log_level = level if level is not None else _level_from_env()

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(use_json),
            ],
            foreign_pre_chain=_shared_processors(),
        )
    )
    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger.

    Args:
        name: Logger name, usually ``__name__``.
    """
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind key/values included in every subsequent log event.

    Example:
        bind_context(tree_file="inventory.yaml")
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Drop everything bound with :func:`bind_context`."""
    structlog.contextvars.clear_contextvars()
