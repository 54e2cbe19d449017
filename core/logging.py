"""
Meal Planner Logging Configuration
Structured logging setup shared by the API server and scripts
"""

import logging
import sys

import structlog

from core.config import settings


def configure_logging(level: str = None, fmt: str = None) -> None:
    """Configure structlog processors and the stdlib root logger"""
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    renderer = (
        structlog.dev.ConsoleRenderer()
        if (fmt or settings.LOG_FORMAT) == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # SQLAlchemy and uvicorn log through stdlib
    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s")
