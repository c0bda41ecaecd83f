"""Structured logging for graphrun.

structlog is wired on top of the stdlib ``logging`` tree: structlog loggers
run a short processor chain and hand the event dict to the root handler,
where a single ``ProcessorFormatter`` renders it. Records from stdlib
loggers (aiohttp, asyncio) pass through the same formatter, so every line
on stderr looks alike. stdout is left to the CLI for the final run state.

Environment:
    GRAPHRUN_LOG_FORMAT=json   one JSON object per line instead of console text
    GRAPHRUN_LOG_LEVEL=DEBUG   level used when configure_logging() gets none

While a graph runs, the executor binds ``run_id`` and ``node`` with
bind_context() so they appear on every line it and its handlers emit.
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

LOG_FORMAT_ENV_VAR = "GRAPHRUN_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "GRAPHRUN_LOG_LEVEL"

# Applied to structlog events and to foreign stdlib records alike
_PRE_CHAIN: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _level_from_env() -> int:
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _renderer(use_json: bool) -> list[Processor]:
    if use_json:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and the root stdlib logger.

    Safe to call more than once; each call replaces the root handler, which
    the CLI does once it knows the requested verbosity.

    Args:
        force_json: Emit JSON regardless of GRAPHRUN_LOG_FORMAT.
        level: Root log level. Defaults to GRAPHRUN_LOG_LEVEL, then INFO.
    """
    use_json = force_json or os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"
    log_level = level if level is not None else _level_from_env()

    structlog.configure(
        processors=[
            *_PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderer(use_json),
            ],
            foreign_pre_chain=_PRE_CHAIN,
        )
    )

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, normally ``get_logger(__name__)``."""
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind key/value pairs onto every log line emitted in this context."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Drop all bound context; the executor calls this when a run ends."""
    structlog.contextvars.clear_contextvars()
