"""fetchkit: a small asynchronous HTTP request helper."""

from fetchkit.fetch import (
    Fetcher,
    FetcherConfig,
    FetchResponse,
    MultipartForm,
    NullLogger,
    RequestOptions,
)


__all__ = [
    "Fetcher",
    "FetcherConfig",
    "FetchResponse",
    "MultipartForm",
    "NullLogger",
    "RequestOptions",
]
