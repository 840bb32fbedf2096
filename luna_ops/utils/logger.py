"""structlog setup for luna-ops: coloured console, JSONL file, service and trace ids on every entry."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from opentelemetry import trace

from luna_ops.config import DEPLOYMENT_ENVIRONMENT, LOG_FILE, LOG_LEVEL, SERVICE_NAME, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Libraries that log every request or statement at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access")

_configured = False


def _level() -> int:
    if VERBOSE_LOGGING:
        return logging.DEBUG
    if LOG_LEVEL.isdigit():
        return int(LOG_LEVEL)
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO


def _add_service_info(_, __, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("env", DEPLOYMENT_ENVIRONMENT)
    return event_dict


def _add_trace_ids(_, __, event_dict: dict) -> dict:
    """Attach the active span's ids so log lines can be joined to traces."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_info,
        _add_trace_ids,
    ]


def _build_handler(handler: logging.Handler, renderer, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = _level()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(_build_handler(logging.StreamHandler(), structlog.dev.ConsoleRenderer(colors=True), level))
    root.addHandler(
        _build_handler(
            logging.FileHandler(LOG_FILE, encoding="utf-8"),
            structlog.processors.JSONRenderer(sort_keys=True),
            level,
        )
    )
    logging.captureWarnings(True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=_shared_processors()
        + [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "luna_ops", **bindings: Any) -> BoundLogger:
    """Return the named structured logger, optionally bound with context."""
    if not _configured:
        _configure_logging()
    logger = structlog.get_logger(name)
    if bindings:
        logger = logger.bind(**bindings)
    return logger


@contextmanager
def log_context(**context: Any) -> Iterator[None]:
    """Add ``context`` to every entry logged in this thread until the block exits.

    Nested blocks restore the outer values on exit.
    """
    with structlog.contextvars.bound_contextvars(**context):
        yield
