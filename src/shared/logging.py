"""Logging configuration shared by every bounded context.

structlog renders both its own events and plain stdlib records through one
``ProcessorFormatter``: JSON lines in production and staging, a rich console
renderer everywhere else. Setting LOG_DIR adds rotating JSON log files.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_MAX_BYTES = 10 * 1024 * 1024


def get_environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL if set, else the default for the current environment."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(get_environment(), "INFO")).upper()


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]


def _formatter(json: bool) -> structlog.stdlib.ProcessorFormatter:
    if json:
        renderer = structlog.processors.JSONRenderer()
        extra = [structlog.processors.format_exc_info, structlog.processors.UnicodeDecoder()]
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
        )
        extra = []

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *extra, renderer],
    )


def _file_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=_MAX_BYTES, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(_formatter(json=True))
    return handler


def configure_logging(
    level: str | None = None,
    log_dir: str | None = None,
    log_file_prefix: str = "orderflow",
) -> None:
    """Route structlog and stdlib logging through the same handlers.

    Safe to call more than once; each call replaces the root handlers.
    """
    level = level or get_log_level()
    log_dir = log_dir or os.getenv("LOG_DIR")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(json=get_environment() in ("production", "staging")))
    handlers = [console]

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(directory / f"{log_file_prefix}.log", level))
        handlers.append(_file_handler(directory / f"{log_file_prefix}_error.log", logging.ERROR))

    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def order_context(order_no: str, **kwargs):
    """Bind ``order_no`` (and any extra fields) to every log event in the block."""
    return structlog.contextvars.bound_contextvars(order_no=order_no, **kwargs)
