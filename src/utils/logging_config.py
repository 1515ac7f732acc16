"""
Structured Logging Configuration

structlog and stdlib logging share one ``ProcessorFormatter``. Lines emitted
by httpx, uvicorn or google-auth therefore carry the same timestamp, level
and bound request id as the proxy's own events.

Output is decided by ``LoggingSettings``:
- console (colored when attached to a terminal) in development
- JSON lines in production, to stdout or to a rotating ``LOG_FILE``

Usage:
    from src.utils.logging_config import configure_logging, get_logger

    configure_logging()

    logger = get_logger(__name__)
    logger.info("Feed translated", url=url, items=10)
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional

import structlog
from structlog.types import Processor

from src.config.settings import LoggingSettings, resolve_logging_settings

ROTATE_MAX_BYTES = 10 * 1024 * 1024
ROTATE_BACKUP_COUNT = 5

# Outbound HTTP and token refresh log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "google.auth", "uvicorn.access")

_installed_handler: Optional[logging.Handler] = None


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(settings: LoggingSettings) -> Processor:
    if settings.json_format:
        # Translated titles are mostly non-ASCII
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def _handler(settings: LoggingSettings) -> logging.Handler:
    if not settings.log_file:
        return logging.StreamHandler(sys.stdout)

    os.makedirs(os.path.dirname(settings.log_file) or ".", exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        settings.log_file,
        maxBytes=ROTATE_MAX_BYTES,
        backupCount=ROTATE_BACKUP_COUNT,
        encoding="utf-8",
    )


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Handler:
    """
    Install the shared formatter on the root logger.

    Calling it again replaces the previous handler instead of adding a
    second one. Returns the installed handler.

    Args:
        settings: Output options. Resolved from the environment when None.
    """
    settings = settings or resolve_logging_settings()
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(settings.level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = _handler(settings)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    global _installed_handler
    root = logging.getLogger()
    if _installed_handler is not None:
        root.removeHandler(_installed_handler)
        _installed_handler.close()
    root.addHandler(handler)
    _installed_handler = handler
    root.setLevel(settings.level)

    quiet_level = logging.DEBUG if settings.level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    return handler


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Attach values such as ``request_id`` to every line logged in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
