"""Logger collaborator for the Fetcher."""

import logging
import sys
from typing import Any, Protocol, runtime_checkable

import structlog


@runtime_checkable
class Logger(Protocol):
    """Structured logger with four severities.

    structlog bound loggers satisfy this protocol.
    """

    def debug(self, event: str, **kw: Any) -> Any: ...

    def info(self, event: str, **kw: Any) -> Any: ...

    def warning(self, event: str, **kw: Any) -> Any: ...

    def error(self, event: str, **kw: Any) -> Any: ...


class NullLogger:
    """Logger that discards every entry."""

    def debug(self, event: str, **kw: Any) -> None:
        pass

    def info(self, event: str, **kw: Any) -> None:
        pass

    def warning(self, event: str, **kw: Any) -> None:
        pass

    def error(self, event: str, **kw: Any) -> None:
        pass


def default_logger(level: int = logging.INFO) -> Logger:
    """Get the logger used when the caller does not supply one.

    Entries go through the configured structlog processors and output,
    but anything below ``level`` is dropped: by default request traces
    are silent while error responses are still reported. Until structlog
    is configured, entries are printed to stderr rather than structlog's
    stdout default.

    Args:
        level: Minimum level to keep (default: INFO).

    Returns:
        Lazily bound structlog logger.
    """
    output = None if structlog.is_configured() else structlog.PrintLogger(sys.stderr)
    log: Logger = structlog.wrap_logger(
        output,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory_args=("fetchkit",),
        component="fetch",
    )
    return log
