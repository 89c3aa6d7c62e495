"""Credential redaction for Fetcher log entries."""

from collections.abc import Mapping
from typing import Any

import httpx


# Headers that must never appear in logs
SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "x-api-key",
        "x-auth-token",
        "proxy-authorization",
        "set-cookie",
    }
)

REDACTED_VALUE = "[REDACTED]"


def is_sensitive_header(header_name: str) -> bool:
    """Check if a header name is sensitive."""
    return header_name.lower() in SENSITIVE_HEADERS


def redact_headers(
    headers: httpx.Headers | Mapping[str, str],
) -> dict[str, str | list[str]]:
    """Redact sensitive headers for logging.

    A header sent more than once (``httpx.Headers`` keeps every value)
    maps to the list of its values, each redacted on its own, so a
    repeated ``Cookie`` cannot leak through a joined string.

    Args:
        headers: Request headers.

    Returns:
        New dictionary keyed by lowercase header name.
    """
    pairs = (
        headers.multi_items()
        if isinstance(headers, httpx.Headers)
        else list(headers.items())
    )
    result: dict[str, str | list[str]] = {}
    for key, value in pairs:
        name = key.lower()
        shown = REDACTED_VALUE if is_sensitive_header(name) else value
        existing = result.get(name)
        if existing is None:
            result[name] = shown
        elif isinstance(existing, list):
            existing.append(shown)
        else:
            result[name] = [existing, shown]
    return result


def redact_url(url: httpx.URL | str) -> str:
    """Hide the userinfo part of a URL.

    Args:
        url: URL that may carry ``user:password@``.

    Returns:
        The URL text with any userinfo replaced by ``[REDACTED]``.
    """
    target = httpx.URL(url)
    if not target.userinfo:
        return str(target)
    text = f"{target.scheme}://{REDACTED_VALUE}@{target.netloc.decode('ascii')}"
    text += target.raw_path.decode("ascii")
    if target.fragment:
        text += f"#{target.fragment}"
    return text


def redact_exchange(
    method: str, url: httpx.URL | str, headers: httpx.Headers
) -> dict[str, Any]:
    """Build the log-safe ``url`` and ``headers`` fields of a response entry."""
    return {"url": f"{method} {redact_url(url)}", "headers": redact_headers(headers)}
