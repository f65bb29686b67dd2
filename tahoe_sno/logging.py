from __future__ import annotations

import logging as py_logging
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog

from tahoe_sno.config import LoggingConfig

_configured = False


def setup_logging(config: Optional[LoggingConfig] = None, *, force: bool = False) -> None:
    """Configure structlog once per process; ``force`` re-applies a new config."""
    global _configured
    if _configured and not force:
        return

    config = config or LoggingConfig()
    level = getattr(py_logging, str(config.level).upper(), py_logging.INFO)
    renderer = structlog.processors.JSONRenderer() if config.json else structlog.dev.ConsoleRenderer()

    if force:
        structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    py_logging.basicConfig(level=level)
    py_logging.getLogger().setLevel(level)
    _configured = True


def get_logger(name: str = __name__):
    if not _configured:
        setup_logging()
    return structlog.get_logger(name)


@contextmanager
def request_context(kind: str, trace_id: str | None = None, **extra: object) -> Iterator[str]:
    """Bind ``kind`` and a trace id to every event logged inside the block.

    Context variables are task-local, so concurrent requests keep separate
    trace ids.
    """
    trace_id = trace_id or uuid.uuid4().hex
    with structlog.contextvars.bound_contextvars(kind=kind, trace_id=trace_id, **extra):
        yield trace_id
