"""Logging setup for the Stockroom domain.

Standard library logging owns the handlers (console plus rotating files) and
structlog formats the events. Deployed environments render JSON lines; local
runs get colored console output with rich tracebacks.

Environment:
    LOG_LEVEL            Overrides the level picked for the environment.
    STOCKROOM_LOG_DIR    Directory for the rotating log files (default ``logs``).
                         An empty value turns file logging off.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

JSON_ENVIRONMENTS = ("production", "staging")

_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5


def current_environment() -> str:
    env = os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV")
    return (env or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", LEVELS_BY_ENV.get(current_environment(), "INFO")).upper()


def get_log_dir() -> Path | None:
    raw = os.getenv("STOCKROOM_LOG_DIR", "logs")
    return Path(raw) if raw.strip() else None


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging() -> None:
    """Route the root logger to stdout and, when a log directory is set, to files."""
    log_level = get_log_level()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    handlers[0].setLevel(log_level)

    log_dir = get_log_dir()
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(log_dir / "stockroom.log", log_level))
        handlers.append(_rotating_handler(log_dir / "stockroom_error.log", logging.ERROR))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = handlers

    # Chatty libraries
    for name in ("asyncio", "httpx", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer(env: str):
    if env in JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def setup_structlog() -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        _renderer(current_environment()),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    setup_stdlib_logging()
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values that every log event on the current context will carry."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
