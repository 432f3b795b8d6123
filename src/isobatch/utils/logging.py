"""structlog setup for console progress lines and per-group log context."""

from __future__ import annotations

import logging
from typing import Any, ContextManager, cast

import structlog
from structlog.dev import ConsoleRenderer
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from isobatch import __version__


def _coerce_level(level: str | int) -> int:
    """Accept `"info"`, `"INFO"` or `logging.INFO`."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, str):
            raise ValueError(f"Invalid log level: {level}")
        return int(resolved)
    return int(level)


def configure_logging(level: str | int = "INFO", json_output: bool = False) -> None:
    """
    Route structlog events through the stdlib root logger.

    Console rendering is the default so group progress and errors read as
    plain lines; `json_output` switches to one JSON object per event.
    """
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=(
                structlog.processors.JSONRenderer() if json_output else ConsoleRenderer()
            ),
            foreign_pre_chain=pre_chain,
        )
    )
    logging.basicConfig(level=_coerce_level(level), handlers=[handler], force=True)


def get_logger(name: str) -> BoundLogger:
    """Logger tagged with the isobatch version."""
    return cast(BoundLogger, structlog.get_logger(name).bind(isobatch_version=__version__))


def log_context(**kwargs: Any) -> ContextManager[None]:
    """Bind fields (e.g. `group_index`) to every event logged by this thread in the block."""
    return structlog.contextvars.bound_contextvars(**kwargs)
