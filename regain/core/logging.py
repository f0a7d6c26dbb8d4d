import logging
import sys
from typing import Any

import structlog

from regain.config.settings import get_settings


def configure_logging(debug: bool | None = None, json_logs: bool = True):
    """Configure stdlib logging and structlog.

    Pipeline modules log through ``logging.getLogger(__name__)``; the
    generation driver emits structlog events that carry the ``user_id`` and
    ``run_id`` bound with ``add_log_context``.
    """
    if debug is None:
        debug = get_settings().debug
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s", stream=sys.stdout, level=level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_log_context(**kwargs: Any) -> None:
    """Bind values (user_id, run_id) to every event logged in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()
