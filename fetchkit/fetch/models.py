"""Data models for the fetch layer."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field

from fetchkit.fetch.constants import HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN


T = TypeVar("T")


class FetcherError(Exception):
    """Base class for errors raised by the fetch layer itself.

    Transport failures are not wrapped: they surface as httpx errors.
    """


class BodyEncodingError(FetcherError):
    """Raised when a request body cannot be encoded for its Content-Type."""


class ResponseDecodeError(FetcherError):
    """Response body did not match its declared Content-Type.

    Attributes:
        status_code: HTTP status code of the response.
        url: Requested URL.
        text: Raw body text that failed to decode.
    """

    def __init__(self, message: str, status_code: int, url: str, text: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.text = text


class RequestOptions(BaseModel):
    """Per-call transport options.

    Headers given here take precedence over the Fetcher's default headers,
    except for Accept-Language and Accept-Encoding which are always forced.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers for this call only"
    )
    timeout: float | httpx.Timeout | None = Field(
        default=None, description="Timeout override in seconds"
    )
    follow_redirects: bool | None = Field(
        default=None, description="Override the client's redirect policy"
    )
    extensions: dict[str, Any] = Field(
        default_factory=dict, description="Extensions forwarded to the transport"
    )


@dataclass(frozen=True)
class FetchResponse(Generic[T]):
    """Transport response augmented with its decoded body.

    Attributes not defined here (``reason_phrase``, ``elapsed``,
    ``raise_for_status`` ...) are looked up on the wrapped response.
    """

    response: httpx.Response
    data: T

    @property
    def status_code(self) -> int:
        """HTTP status code."""
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        """Response headers."""
        return self.response.headers

    @property
    def url(self) -> httpx.URL:
        """URL of the request that produced this response."""
        return self.response.url

    @property
    def request(self) -> httpx.Request:
        """Request as sent on the wire."""
        return self.response.request

    @property
    def is_success(self) -> bool:
        """Check if the status is 2xx."""
        return HTTP_STATUS_OK_MIN <= self.status_code < HTTP_STATUS_OK_MAX

    @property
    def is_error(self) -> bool:
        """Check if the status is 4xx or 5xx."""
        return self.response.is_error

    def __getattr__(self, name: str) -> Any:
        if name == "response":
            raise AttributeError(name)
        return getattr(self.response, name)
