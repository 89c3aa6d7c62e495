"""structlog setup for applications that use the Fetcher."""

import logging
import sys
from typing import TextIO

import structlog


# stdlib loggers of the transport; httpx reports every request at INFO
TRANSPORT_LOGGERS = ("httpx", "httpcore")


def _renderer(json_format: bool) -> structlog.types.Processor:
    if json_format:
        return structlog.processors.JSONRenderer(sort_keys=True, default=str)
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    level: int | str = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Route Fetcher and transport logging to one stream.

    Fetcher entries such as ``fetch_response`` carry dicts (headers,
    decoded bodies); the JSON renderer falls back to ``str`` for values
    it cannot encode. The httpx and httpcore loggers are held at WARNING
    unless ``level`` is DEBUG, since each exchange is already reported by
    the Fetcher itself.

    Args:
        level: Minimum level, as a number or a name such as ``"debug"``.
        output: Output stream (default: stderr).
        json_format: JSON lines when True, plain console text otherwise.
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping()[level.upper()]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(json_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(name)s %(levelname)s %(message)s", stream=output)
    transport_level = level if level <= logging.DEBUG else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
