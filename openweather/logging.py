import logging
import sys
from typing import Optional

import structlog

from .config import AppSettings

# transport internals that log every connection at DEBUG/INFO
NOISY_LOGGERS = ("urllib3", "requests")


def init_logging(log_level: str = "INFO", settings: Optional[AppSettings] = None) -> structlog.BoundLogger:
    """Configure stdlib logging and structlog for applications using the client.

    The library itself never calls this; it only emits events through
    ``structlog.get_logger()``. Events render as JSON lines, or through the
    console renderer when ``log_level`` is DEBUG.
    """
    if settings is not None:
        log_level = settings.log_level
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if level == logging.DEBUG else structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    app_name = settings.app_name if settings is not None else "openweather"
    return structlog.get_logger(app_name).bind(app=app_name)
