"""
structlog setup for walletpass.

Modules log through ``get_logger(__name__)``; only applications (the CLI)
call ``configure_logging``.
"""
from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import IO, Any, Iterator, Optional, cast

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from walletpass import __version__

LOG_LEVEL_ENV = "WALLETPASS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _coerce_level(level: str | int | None) -> int:
    """Translate a level name or number (or $WALLETPASS_LOG_LEVEL) into a logging level."""
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, str):
            raise ValueError(f"Invalid log level: {level}")
        return int(resolved)
    return int(level)


def configure_logging(
    level: str | int | None = None,
    json_output: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Route structlog events through a stdlib handler on ``stream`` (stderr by default)."""
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    # stdout is reserved for command output (archives, manifests)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )
    logging.basicConfig(level=_coerce_level(level), handlers=[handler], force=True)


def get_logger(name: str) -> BoundLogger:
    """Return a logger bound to the module's short name and the package version."""
    return cast(
        BoundLogger,
        structlog.get_logger(name).bind(component=name.rsplit(".", 1)[-1], version=__version__),
    )


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind ``kwargs`` to every event logged inside the block, restoring earlier values after."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
