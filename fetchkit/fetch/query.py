"""URL resolution and query-string encoding."""

import re
from collections.abc import Mapping
from datetime import UTC, date, datetime

import httpx


QueryValue = bool | date | datetime | int | float | str | None
QueryParams = Mapping[str, QueryValue]

_ABSOLUTE_URL = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def resolve_url(endpoint: str, path: str) -> str:
    """Resolve a request path against the base endpoint.

    Args:
        endpoint: Base endpoint, may be empty.
        path: Relative path, or an absolute URL used verbatim.

    Returns:
        Absolute URL string.
    """
    if _ABSOLUTE_URL.match(path):
        return path
    return endpoint + path


def to_timestamp(value: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 timestamp.

    Naive datetimes are taken as UTC. The result always carries
    millisecond precision and a ``Z`` suffix, e.g.
    ``2024-01-02T03:04:05.000Z``.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def format_query_value(value: bool | date | datetime | int | float | str) -> str:
    """Convert a single query value to its string form."""
    # bool is an int subclass and datetime is a date subclass: order matters
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return to_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def clean_query(query: QueryParams) -> dict[str, str]:
    """Drop absent values and stringify the rest, keeping mapping order."""
    return {
        key: format_query_value(value)
        for key, value in query.items()
        if value is not None
    }


def apply_query(url: str, query: QueryParams | None) -> httpx.URL:
    """Build the request URL, replacing its query string when given one.

    Args:
        url: Absolute URL.
        query: Query parameters, or None to keep the URL as is.

    Returns:
        The URL with the encoded query string.
    """
    target = httpx.URL(url)
    if query is None:
        return target
    return target.copy_with(params=httpx.QueryParams(clean_query(query)))
