"""Logging configuration for the storefront.

Every context logs through ``structlog.get_logger(__name__)``; this module
wires those loggers to the stdlib root logger once, at app start. Session
tokens never reach a log sink in clear text.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

from shared.config import current_environment, is_production_like

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_MAX_LOG_BYTES = 10 * 1024 * 1024

# Event keys whose values are bearer credentials
_SECRET_KEYS = frozenset({"guest_token", "access_token", "token", "client_secret", "password"})

# Third-party loggers that duplicate the transport's own events
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def get_log_level() -> str:
    default = _LEVELS_BY_ENV.get(current_environment(), "INFO")
    return os.getenv("LOG_LEVEL", default).upper()


def redact_secrets(_logger, _method_name: str, event_dict: dict) -> dict:
    """Keep a short prefix of credential values so log lines stay correlatable."""
    for key in _SECRET_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and value:
            event_dict[key] = f"{value[:4]}***"
    return event_dict


def _rotating_file(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging() -> None:
    level = get_log_level()
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_file(log_dir / "storefront.log", level),
        _rotating_file(log_dir / "storefront_error.log", logging.ERROR),
    ]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer():
    if is_production_like():
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            ),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure stdlib handlers and structlog processors for the app."""
    setup_stdlib_logging()
    setup_structlog()


def add_context(**kwargs: Any) -> None:
    """Bind values (request id, checkout key) onto every subsequent log line."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
