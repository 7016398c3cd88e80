"""Logging setup for the marketplace service.

Everything is driven by ``Settings``: the environment picks the default
level and the renderer, and file handlers are only attached when
``MARKETPLACE_LOG_DIR`` is set.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

import structlog

from shared.config import Settings, get_settings

_DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_JSON_ENVIRONMENTS = {"production", "staging"}

_MAX_LOG_BYTES = 10 * 1024 * 1024


def get_log_level(settings: Settings | None = None) -> str:
    """Explicit ``log_level`` wins; otherwise derive it from the environment."""
    settings = settings or get_settings()
    if settings.log_level:
        return settings.log_level.upper()
    return _DEFAULT_LEVELS.get(settings.env.lower(), "INFO")


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(settings: Settings | None = None) -> None:
    """Route stdlib logging to stdout and, optionally, to rotating files."""
    settings = settings or get_settings()
    level = get_log_level(settings)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(log_dir / "marketplace.log", level))
        handlers.append(_rotating_handler(log_dir / "marketplace_error.log", logging.ERROR))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = handlers

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _renderer(env: str):
    if env in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=5),
    )


def setup_structlog(settings: Settings | None = None) -> None:
    """Configure the structlog processor chain on top of stdlib logging."""
    settings = settings or get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(settings.env.lower()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=settings.env.lower() in _JSON_ENVIRONMENTS,
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Configure all logging for the application."""
    settings = settings or get_settings()
    setup_stdlib_logging(settings)
    setup_structlog(settings)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs) -> None:
    """Bind values that every later log line in this context will carry."""
    structlog.contextvars.bind_contextvars(**{key: value for key, value in kwargs.items() if value is not None})


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
