# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Process logging with structlog.

These are operator logs. A session's activity log is part of its state and
never goes through here.

Development renders colored key-value lines; other environments emit one
JSON object per event. Modules that use logging.getLogger(__name__) are
routed to the same stream through logging.basicConfig.

Example:
    >>> setup_logging(get_settings())
    >>> logger = get_logger(__name__)
    >>> logger.info("turn_completed", agent="QUIZ_GENERATOR", turn=3)
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from src.core.config.settings import Settings

_QUIET_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "asyncio",
    "LiteLLM",
    "LiteLLM Router",
    "LiteLLM Proxy",
)


def _processors(settings: "Settings") -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.is_development or settings.debug:
        chain.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        chain += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return chain


def setup_logging(settings: "Settings") -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Supplies log_level, environment and debug.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stdout,
        level=level,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("src").setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger tagged with the calling module's name."""
    return structlog.get_logger(logger_name=name)


def bind_context(**kwargs: object) -> None:
    """Attach key-value pairs to every structlog event in the current task.

    Example:
        >>> bind_context(session_id="abc-123")
        >>> logger.info("human_input_received")  # carries session_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)
