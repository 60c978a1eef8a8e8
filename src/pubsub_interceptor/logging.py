"""
structlog setup for the interceptor.

Console rendering by default, JSON when PUBSUB_LOG_JSON is set. The message
ID and subscription of the envelope being handled are bound as structlog
contextvars, so every event logged while handling it carries them.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Generator

import structlog
from structlog.types import Processor

from .config import get_settings


def configure_logging(
    json_output: bool | None = None,
    log_level: str | None = None,
) -> None:
    """
    Configure structlog.

    Args:
        json_output: JSON lines when True, coloured console output when False.
            Defaults to settings.LOG_JSON.
        log_level: Level name; defaults to settings.LOG_LEVEL
    """
    settings = get_settings()
    if json_output is None:
        json_output = settings.LOG_JSON
    level_num = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)

    logging.basicConfig(format='%(message)s', stream=sys.stdout, level=level_num)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso'),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def logging_context(
    message_id: str | None = None,
    subscription: str | None = None,
) -> Generator[None, None, None]:
    """
    Bind message_id / subscription for the duration of the block.

    None values are left unbound; previous bindings come back on exit.
    """
    bound = {'message_id': message_id, 'subscription': subscription}
    with structlog.contextvars.bound_contextvars(
        **{key: value for key, value in bound.items() if value is not None}
    ):
        yield


class PipelineTimer:
    """Per-stage wall-clock timings (ms) for one intercepted request."""

    def __init__(self):
        self.stages: dict[str, float] = {}
        self._created = time.perf_counter()

    @contextmanager
    def stage(self, name: str) -> Generator[None, None, None]:
        started = time.perf_counter()
        try:
            yield
        finally:
            self.stages[name] = (time.perf_counter() - started) * 1000

    def summary(self) -> dict[str, Any]:
        """Timings for a log event: total_ms plus each stage, rounded to 0.01 ms."""
        return {
            'total_ms': round((time.perf_counter() - self._created) * 1000, 2),
            'stages': {name: round(ms, 2) for name, ms in self.stages.items()},
        }


# PUBSUB_LOG_JSON=true (or configure_logging(json_output=True)) switches to JSON
configure_logging()
