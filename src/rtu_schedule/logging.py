"""structlog setup for the timetable client.

Library modules only call ``get_logger(__name__)``; nothing is configured
on import. Applications (and ``scripts/get_schedule.py``) call
``setup_logging`` once, usually via ``configure_from(config)``.

Events are snake_case with keyword context, e.g.::

    log.info("schedule_assembled", period="25/26-R", entries=42)
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from rtu_schedule.config import ScheduleConfig

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    stream: IO[str] | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_output: JSON lines if True, colored console output otherwise.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        stream: Destination; stderr by default so stdout stays free for data.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    stream = stream or sys.stderr

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(stream)]
    root.setLevel(numeric_level)

    # httpx request lines only at DEBUG
    noisy_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def configure_from(config: ScheduleConfig) -> None:
    """Apply ``log_json`` and ``log_level`` from a ScheduleConfig."""
    setup_logging(json_output=config.log_json, log_level=config.log_level)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
