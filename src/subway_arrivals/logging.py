"""Structured logging configuration and the arrival log facade."""

from __future__ import annotations

import logging
import sys
from enum import IntEnum
from typing import TYPE_CHECKING, Callable

import structlog

if TYPE_CHECKING:
    from structlog.types import Processor

    from subway_arrivals.config import Settings

from subway_arrivals.config import get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the root stdlib logger.

    Development gets the colored console renderer; other environments emit
    JSON lines. Called once at startup, see ``ArrivalReporter``.
    """
    settings = settings or get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.environment == "development":
        # Pretty printing for development
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        # JSON output for production
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level.upper())


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.stdlib.get_logger(name)


class LogLevel(IntEnum):
    """Severity passed to a registered log sink."""

    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3


LogSink = Callable[[LogLevel, str], None]

_DEFAULT_METHODS = {
    LogLevel.ERROR: "error",
    LogLevel.WARN: "warning",
    LogLevel.INFO: "info",
    LogLevel.DEBUG: "debug",
}

logger = get_logger(__name__)


class LogFacade:
    """Single-slot forwarder from decode code to a caller-supplied sink.

    Every message is forwarded regardless of ``min_level``; the threshold is
    kept so sinks and callers can read it, but the facade never filters.
    Without a registered sink, messages go to this module's structlog logger.
    """

    def __init__(self, sink: LogSink | None = None, min_level: LogLevel = LogLevel.INFO) -> None:
        self.sink = sink
        self.min_level = min_level

    @classmethod
    def from_settings(cls, settings: Settings, sink: LogSink | None = None) -> LogFacade:
        """Build a facade whose threshold mirrors ``settings.log_level``."""
        name = settings.log_level.upper()
        if name == "WARNING":
            name = "WARN"
        min_level = LogLevel[name] if name in LogLevel.__members__ else LogLevel.INFO
        return cls(sink=sink, min_level=min_level)

    def register(self, sink: LogSink | None) -> None:
        """Replace the registered sink. ``None`` restores the default path."""
        self.sink = sink

    def log(self, level: LogLevel, message: str) -> None:
        if self.sink is None:
            getattr(logger, _DEFAULT_METHODS[level])(message.rstrip("\n"), sink="default")
            return

        self.sink(level, message)


_process_facade = LogFacade()


def get_log_facade() -> LogFacade:
    """Return the process-wide facade."""
    return _process_facade


def register_logger(sink: LogSink | None) -> None:
    """Register the process-wide log sink."""
    _process_facade.register(sink)


def log_message(level: LogLevel, message: str) -> None:
    """Log through the process-wide facade."""
    _process_facade.log(level, message)
