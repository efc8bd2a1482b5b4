from __future__ import annotations

import logging
import os
import structlog


def _get_log_level() -> int:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level, logging.INFO)


def _log_format() -> str:
    log_format = os.getenv("LOG_FORMAT", "json").lower()
    if os.getenv("APP_ENV") == "dev" and "LOG_FORMAT" not in os.environ:
        log_format = "console"
    return log_format


def setup_logging() -> None:
    """Configure structlog for structured logging.

    - JSON lines with ISO/UTC timestamp, level, event and bound fields
    - Console rendering when APP_ENV=dev and LOG_FORMAT is not set
    - contextvars are merged so request_id bound by the middleware flows
      into service-level events (reservation_created, ...)
    """

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if _log_format() == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    # uvicorn / sqlalchemy records go through the same formatter
    logging.basicConfig(
        level=_get_log_level(),
        handlers=[handler],
        force=True,
    )
