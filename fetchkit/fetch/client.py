"""Asynchronous HTTP request helper."""

import threading
from collections.abc import Mapping
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self

import httpx
import structlog

from fetchkit.fetch.body import (
    MultipartForm,
    default_content_type,
    describe_body,
    encode_body,
    is_json_content_type,
)
from fetchkit.fetch.config import FetcherConfig
from fetchkit.fetch.constants import (
    BODYLESS_METHODS,
    DEFAULT_MIN_ERROR,
    FORCED_ACCEPT_ENCODING,
    FORCED_ACCEPT_LANGUAGE,
    HEADER_ACCEPT_ENCODING,
    HEADER_ACCEPT_LANGUAGE,
    HEADER_CONTENT_TYPE,
    HTTP_STATUS_NO_CONTENT,
)
from fetchkit.fetch.logger import Logger, default_logger
from fetchkit.fetch.models import FetchResponse, RequestOptions, ResponseDecodeError
from fetchkit.fetch.query import QueryParams, apply_query, clean_query, resolve_url
from fetchkit.fetch.redact import redact_exchange


if TYPE_CHECKING:
    from fetchkit.settings.app import FetcherSettings


logger = structlog.get_logger()


class Fetcher:
    """HTTP request helper bound to a base endpoint.

    Every verb method runs the same pipeline:

    - resolve the path against the endpoint (absolute URLs are kept)
    - merge per-call headers over the default headers
    - encode query parameters and the body
    - force ``Accept-Language: en`` and ``Accept-Encoding: gzip``
    - send, count, decode and log the exchange

    HTTP error statuses do not raise; inspect ``status_code`` on the
    returned response. Transport errors propagate as httpx exceptions.
    """

    def __init__(
        self,
        endpoint: str = "",
        headers: Mapping[str, str] | None = None,
        logger: Logger | None = None,
        min_error: int = DEFAULT_MIN_ERROR,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        follow_redirects: bool = False,
    ) -> None:
        """Initialize the fetcher.

        Args:
            endpoint: Base endpoint prepended to relative paths.
            headers: Default headers for every request.
            logger: Logger for request/response entries; defaults to a
                structlog logger that drops debug entries.
            min_error: Responses with a status at or above this are logged
                at error level.
            client: Client to send requests with. When omitted the fetcher
                creates and owns one.
            timeout: Timeout in seconds for an owned client.
            follow_redirects: Redirect policy for an owned client.
        """
        self.endpoint = endpoint
        self.headers = httpx.Headers(headers)
        self.logger: Logger = logger if logger is not None else default_logger()
        self.min_error = min_error
        self._sequence = 0
        self._sequence_lock = threading.Lock()
        self._owns_client = client is None
        if client is None:
            client_kwargs: dict[str, Any] = {"follow_redirects": follow_redirects}
            if timeout is not None:
                client_kwargs["timeout"] = timeout
            client = httpx.AsyncClient(**client_kwargs)
        self._client = client

    @classmethod
    def from_config(
        cls,
        config: FetcherConfig,
        logger: Logger | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> Self:
        """Create a fetcher from a validated configuration."""
        return cls(
            config.endpoint,
            config.headers,
            logger,
            config.min_error,
            client=client,
            timeout=config.timeout_seconds,
            follow_redirects=config.follow_redirects,
        )

    @classmethod
    def from_settings(
        cls,
        settings: "FetcherSettings",
        logger: Logger | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> Self:
        """Create a fetcher from environment settings.

        Without an explicit logger, the default logger filters at
        ``settings.log_level``.
        """
        if logger is None:
            logger = default_logger(settings.log_level_value)
        return cls.from_config(settings.to_fetcher_config(), logger, client)

    @property
    def sequence(self) -> int:
        """Number of requests that received a response."""
        return self._sequence

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def get(
        self,
        path: str,
        query: QueryParams | None = None,
        data: None = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a GET request. ``data`` is never sent."""
        return await self.request("GET", path, query, None, options)

    async def head(
        self,
        path: str,
        query: QueryParams | None = None,
        data: None = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a HEAD request. ``data`` is never sent."""
        return await self.request("HEAD", path, query, None, options)

    async def post(
        self,
        path: str,
        query: QueryParams | None = None,
        data: Any = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a POST request."""
        return await self.request("POST", path, query, data, options)

    async def put(
        self,
        path: str,
        query: QueryParams | None = None,
        data: Any = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a PUT request."""
        return await self.request("PUT", path, query, data, options)

    async def patch(
        self,
        path: str,
        query: QueryParams | None = None,
        data: Any = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a PATCH request."""
        return await self.request("PATCH", path, query, data, options)

    async def delete(
        self,
        path: str,
        query: QueryParams | None = None,
        data: Any = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a DELETE request."""
        return await self.request("DELETE", path, query, data, options)

    async def report(
        self,
        path: str,
        query: QueryParams | None = None,
        data: Any = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a WebDAV REPORT request."""
        return await self.request("REPORT", path, query, data, options)

    async def propfind(
        self,
        path: str,
        query: QueryParams | None = None,
        data: Any = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a WebDAV PROPFIND request."""
        return await self.request("PROPFIND", path, query, data, options)

    async def request(
        self,
        method: str,
        path: str,
        query: QueryParams | None = None,
        data: Any = None,
        options: RequestOptions | None = None,
    ) -> FetchResponse[Any]:
        """Send a request and decode its response.

        Args:
            method: HTTP method.
            path: Path relative to the endpoint, or an absolute URL.
            query: Query parameters; None values are dropped. When given,
                they replace any query string already in ``path``.
            data: Request body.
            options: Per-call transport options.

        Returns:
            The response with its decoded body in ``data``.

        Raises:
            httpx.TransportError: If no response was received.
            BodyEncodingError: If the body cannot be encoded.
            ResponseDecodeError: If a JSON response does not parse.
        """
        method = method.upper()
        options = options or RequestOptions()
        if method in BODYLESS_METHODS:
            data = None

        url = apply_query(resolve_url(self.endpoint, path), query)
        # Multipart bodies need the boundary httpx generates; only an
        # explicit per-call Content-Type may override it.
        skip = (
            frozenset({HEADER_CONTENT_TYPE.lower()})
            if isinstance(data, MultipartForm)
            else frozenset()
        )
        headers = self._merge_headers(options.headers, skip)

        if HEADER_CONTENT_TYPE not in headers:
            content_type = default_content_type(data)
            if content_type is not None:
                headers[HEADER_CONTENT_TYPE] = content_type

        body = encode_body(data, headers.get(HEADER_CONTENT_TYPE))

        headers[HEADER_ACCEPT_LANGUAGE] = FORCED_ACCEPT_LANGUAGE
        headers[HEADER_ACCEPT_ENCODING] = FORCED_ACCEPT_ENCODING

        self._emit(
            "debug",
            "fetch_request",
            path=f"{method} {url.path}",
            query=clean_query(query) if query is not None else None,
            data=describe_body(data),
        )

        request = self._client.build_request(
            method,
            url,
            headers=headers,
            timeout=(
                options.timeout
                if options.timeout is not None
                else httpx.USE_CLIENT_DEFAULT
            ),
            extensions=options.extensions or None,
            **body.as_request_kwargs(),
        )
        response = await self._client.send(
            request,
            stream=True,
            follow_redirects=(
                options.follow_redirects
                if options.follow_redirects is not None
                else httpx.USE_CLIENT_DEFAULT
            ),
        )
        # Status and headers have arrived; a failing body read still counts.
        sequence = self._next_sequence()
        try:
            await response.aread()
        finally:
            await response.aclose()

        decoded = self._decode(method, response)

        level = "error" if response.status_code >= self.min_error else "debug"
        self._emit(
            level,
            "fetch_response",
            **redact_exchange(method, url, headers),
            status=response.status_code,
            data=decoded,
            sequence=sequence,
        )
        return FetchResponse(response=response, data=decoded)

    def _merge_headers(
        self,
        call_headers: Mapping[str, str],
        skip: frozenset[str] = frozenset(),
    ) -> httpx.Headers:
        """Merge per-call headers over the defaults.

        Args:
            call_headers: Headers for this call only.
            skip: Lowercase names of default headers to leave out.

        Returns:
            New headers; the defaults are not modified.
        """
        headers = httpx.Headers(call_headers)
        for key, value in self.headers.multi_items():
            if key not in headers and key not in skip:
                headers[key] = value
        return headers

    def _next_sequence(self) -> int:
        with self._sequence_lock:
            self._sequence += 1
            return self._sequence

    def _decode(self, method: str, response: httpx.Response) -> Any:
        """Decode a response body.

        Args:
            method: Request method.
            response: Response with its body already read.

        Returns:
            "" for 204 and HEAD responses, parsed JSON for JSON content
            types, the text body otherwise.

        Raises:
            ResponseDecodeError: If a JSON body does not parse.
        """
        if response.status_code == HTTP_STATUS_NO_CONTENT or method == "HEAD":
            return ""

        if is_json_content_type(response.headers.get(HEADER_CONTENT_TYPE)):
            try:
                return response.json()
            except ValueError as e:
                msg = f"Invalid JSON body from {method} {response.url}: {e}"
                raise ResponseDecodeError(
                    msg,
                    status_code=response.status_code,
                    url=str(response.url),
                    text=response.text,
                ) from e

        return response.text

    def _emit(self, level: str, event: str, **fields: Any) -> None:
        """Send one entry to the logger without letting it fail the call."""
        try:
            getattr(self.logger, level)(event, **fields)
        except Exception:  # noqa: BLE001
            logger.warning(
                "fetch_log_failed",
                level=level,
                log_event=event,
                exc_info=True,
            )
