"""Logging setup."""

from fetchkit.observability.logging import TRANSPORT_LOGGERS, configure_logging


__all__ = [
    "TRANSPORT_LOGGERS",
    "configure_logging",
]
