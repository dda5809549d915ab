"""
Structured logging configuration using structlog wrapping stdlib.

Human-readable console output by default, JSON lines when
SMART_SCHEDULER_LOG_FORMAT=json is set. Every event carries the name of the
thread that emitted it, so requests handled on the scheduler's worker pool
(SchedulerThread_0, SchedulerThread_1, ...) can be told apart.

Logs go to stderr; the CLI keeps stdout for its JSON results.

Usage:
    from smart_scheduler.logging_config import setup_logging, get_logger
    setup_logging()
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from typing import IO, Any

import structlog

DEFAULT_LEVEL = "INFO"


def add_thread_name(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("thread", threading.current_thread().name)
    return event_dict


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
    stream: IO[str] | None = None,
) -> None:
    if level is None:
        level = os.environ.get("SMART_SCHEDULER_LOG_LEVEL", DEFAULT_LEVEL)

    if json_output is None:
        json_output = os.environ.get("SMART_SCHEDULER_LOG_FORMAT", "").lower() == "json"

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_thread_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        final_processors: list[structlog.types.Processor] = [structlog.processors.format_exc_info, renderer]
    else:
        final_processors = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *final_processors,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["DEFAULT_LEVEL", "add_thread_name", "get_logger", "setup_logging"]
