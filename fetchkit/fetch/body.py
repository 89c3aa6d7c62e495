"""Request body classification and encoding.

Bodies fall into three groups:

- raw kinds that the transport can send as they are: ``str``, ``bytes``,
  ``bytearray``, ``memoryview``, file-like objects, async byte streams,
  ``httpx.QueryParams`` and ``MultipartForm``
- flat mappings sent as ``application/x-www-form-urlencoded``
- everything else, serialized as JSON
"""

import io
import json
from collections.abc import AsyncIterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

import httpx

from fetchkit.fetch.constants import CONTENT_TYPE_FORM, CONTENT_TYPE_JSON
from fetchkit.fetch.models import BodyEncodingError
from fetchkit.fetch.query import clean_query, to_timestamp


class BodyKind(str, Enum):
    """How a request body is put on the wire."""

    EMPTY = "EMPTY"
    RAW = "RAW"
    STREAM = "STREAM"
    MULTIPART = "MULTIPART"
    FORM = "FORM"
    JSON = "JSON"


@dataclass(frozen=True)
class MultipartForm:
    """A ``multipart/form-data`` body.

    Attributes:
        fields: Plain form fields.
        files: File fields, in any shape httpx accepts for ``files=``
            (``{"name": (filename, content, content_type)}`` ...).
    """

    fields: Mapping[str, Any] = field(default_factory=dict)
    files: Mapping[str, Any] | Sequence[tuple[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class EncodedBody:
    """Encoded body, ready to be handed to ``httpx.AsyncClient.build_request``."""

    kind: BodyKind
    content: str | bytes | AsyncIterable[bytes] | None = None
    form: MultipartForm | None = None

    def as_request_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``build_request``."""
        if self.form is not None:
            return {"data": dict(self.form.fields), "files": self.form.files}
        if self.content is None:
            return {}
        return {"content": self.content}


_RAW_TYPES = (str, bytes, bytearray, memoryview, io.IOBase, httpx.QueryParams)


def is_form_content_type(content_type: str | None) -> bool:
    """Check if a Content-Type asks for URL-encoded form data."""
    return content_type is not None and content_type.lower().startswith(
        CONTENT_TYPE_FORM
    )


def is_json_content_type(content_type: str | None) -> bool:
    """Check if a Content-Type declares a JSON body (``+json`` included)."""
    if not content_type:
        return False
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime == CONTENT_TYPE_JSON or mime.endswith("+json")


def describe_body(data: object) -> object:
    """Loggable form of a body: binary and streamed payloads are summarized."""
    if isinstance(data, bytes | bytearray | memoryview):
        return f"<{len(data)} bytes>"
    if isinstance(data, io.IOBase | AsyncIterable | MultipartForm):
        return f"<{type(data).__name__}>"
    return data


def default_content_type(data: object) -> str | None:
    """Content-Type to use when the caller did not set one.

    Multipart bodies get none so the transport can add the boundary.
    """
    if isinstance(data, MultipartForm):
        return None
    return CONTENT_TYPE_JSON


def classify_body(data: object, content_type: str | None) -> BodyKind:
    """Decide how a body is encoded.

    Args:
        data: Body payload as given by the caller.
        content_type: Effective request Content-Type.

    Returns:
        The body kind.
    """
    if data is None:
        return BodyKind.EMPTY
    if is_form_content_type(content_type) and isinstance(data, Mapping):
        return BodyKind.FORM
    if isinstance(data, MultipartForm):
        return BodyKind.MULTIPART
    if isinstance(data, _RAW_TYPES):
        return BodyKind.RAW
    if isinstance(data, AsyncIterable):
        return BodyKind.STREAM
    if is_form_content_type(content_type):
        msg = f"Form body must be a mapping, got {type(data).__name__}"
        raise BodyEncodingError(msg)
    return BodyKind.JSON


def _json_default(value: object) -> str:
    if isinstance(value, datetime):
        return to_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _raw_content(data: object) -> str | bytes:
    if isinstance(data, str | bytes):
        return data
    if isinstance(data, bytearray | memoryview):
        return bytes(data)
    if isinstance(data, httpx.QueryParams):
        return str(data)
    # file-like
    content: str | bytes = data.read()  # type: ignore[attr-defined]
    return content


def encode_body(data: object, content_type: str | None) -> EncodedBody:
    """Encode a request body according to its kind.

    Args:
        data: Body payload as given by the caller.
        content_type: Effective request Content-Type.

    Returns:
        Encoded body.

    Raises:
        BodyEncodingError: If the payload cannot be encoded.
    """
    kind = classify_body(data, content_type)

    if kind == BodyKind.EMPTY:
        return EncodedBody(kind=kind)
    if isinstance(data, MultipartForm):
        # httpx falls back to URL-encoding when there are no files
        if not data.files:
            msg = "Multipart body needs at least one file; send fields as a form mapping"
            raise BodyEncodingError(msg)
        return EncodedBody(kind=kind, form=data)
    if kind == BodyKind.FORM and isinstance(data, Mapping):
        return EncodedBody(
            kind=kind, content=str(httpx.QueryParams(clean_query(data)))
        )
    if kind == BodyKind.RAW:
        return EncodedBody(kind=kind, content=_raw_content(data))
    if kind == BodyKind.STREAM and isinstance(data, AsyncIterable):
        return EncodedBody(kind=kind, content=data)

    try:
        text = json.dumps(
            data, default=_json_default, ensure_ascii=False, separators=(",", ":")
        )
    except (TypeError, ValueError) as e:
        msg = f"Body is not JSON serializable: {e}"
        raise BodyEncodingError(msg) from e
    return EncodedBody(kind=kind, content=text)
