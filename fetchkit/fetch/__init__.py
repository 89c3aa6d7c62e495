"""HTTP request helper over httpx.

This module provides the Fetcher and its supporting pieces:
- Default and per-call header merging
- Query-string and body encoding
- JSON/text response decoding
- Request sequence counting
- Structured request/response logging with header redaction
"""

from fetchkit.fetch.body import BodyKind, MultipartForm, encode_body
from fetchkit.fetch.client import Fetcher
from fetchkit.fetch.config import FetcherConfig
from fetchkit.fetch.constants import (
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    DEFAULT_MIN_ERROR,
)
from fetchkit.fetch.logger import Logger, NullLogger, default_logger
from fetchkit.fetch.models import (
    BodyEncodingError,
    FetcherError,
    FetchResponse,
    RequestOptions,
    ResponseDecodeError,
)
from fetchkit.fetch.redact import redact_exchange, redact_headers, redact_url


__all__ = [
    # Client
    "Fetcher",
    # Config
    "FetcherConfig",
    # Body
    "BodyKind",
    "MultipartForm",
    "encode_body",
    # Logging
    "Logger",
    "NullLogger",
    "default_logger",
    # Models
    "FetchResponse",
    "RequestOptions",
    "FetcherError",
    "BodyEncodingError",
    "ResponseDecodeError",
    # Constants
    "CONTENT_TYPE_FORM",
    "CONTENT_TYPE_JSON",
    "DEFAULT_MIN_ERROR",
    # Redaction
    "redact_exchange",
    "redact_headers",
    "redact_url",
]
