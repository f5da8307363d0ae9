# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Transport-agnostic request abstraction consumed by the validator.

Header names are normalized to lower case when a request is built, so every
lookup through ``get_header_value`` is case-insensitive. The method is kept
verbatim.
"""

from __future__ import annotations

import threading
from typing import BinaryIO, Dict, Iterable, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable
from urllib.parse import parse_qsl, urlsplit

HeaderInput = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]
BodyInput = Union[bytes, bytearray, str, BinaryIO, None]


@runtime_checkable
class Request(Protocol):
    """The minimal request surface the validation pipeline reads."""

    def get_method(self) -> str: ...

    def get_path(self) -> str: ...

    def get_header_value(self, name: str) -> str: ...

    def get_raw_query_string(self) -> str: ...

    def get_body_bytes(self) -> bytes: ...


class HttpRequest:
    """Default in-memory ``Request`` implementation.

    *body* may be bytes, text (encoded as UTF-8) or a binary stream. A stream
    is read once, on the first ``get_body_bytes`` call, and the bytes are kept
    so that validating the same request twice sees the same body.
    """

    def __init__(
        self,
        method: str,
        path: str,
        *,
        headers: HeaderInput = None,
        query: str = "",
        body: BodyInput = None,
    ):
        self.method = method
        self.path = path or "/"
        self.query = query.lstrip("?")
        self.headers = _normalize_headers(headers)
        self._lock = threading.Lock()
        self._stream: Optional[BinaryIO] = None
        self._body: Optional[bytes] = None
        if body is None:
            self._body = b""
        elif isinstance(body, (bytes, bytearray)):
            self._body = bytes(body)
        elif isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._stream = body

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        headers: HeaderInput = None,
        body: BodyInput = None,
    ) -> "HttpRequest":
        """Build a request from an absolute or origin-form URL."""

        parts = urlsplit(url)
        return cls(method, parts.path or "/", headers=headers, query=parts.query, body=body)

    def get_method(self) -> str:
        return self.method

    def get_path(self) -> str:
        return self.path

    def get_header_value(self, name: str) -> str:
        return self.headers.get(name.lower(), "")

    def get_raw_query_string(self) -> str:
        return self.query

    def get_body_bytes(self) -> bytes:
        with self._lock:
            if self._stream is not None:
                data = self._stream.read()
                self._body = data.encode("utf-8") if isinstance(data, str) else bytes(data or b"")
                self._stream = None
            return self._body or b""

    def __repr__(self) -> str:
        target = self.path + (f"?{self.query}" if self.query else "")
        return f"HttpRequest({self.method!r}, {target!r})"


def parse_query(query: str) -> Dict[str, str]:
    """Parse a raw query string into a flat mapping; the last value wins."""

    return dict(parse_qsl(query, keep_blank_values=True))


def _normalize_headers(headers: HeaderInput) -> Dict[str, str]:
    if headers is None:
        return {}
    items = headers.items() if isinstance(headers, Mapping) else headers
    combined: Dict[str, str] = {}
    for name, value in items:
        key = str(name).strip().lower()
        value = str(value).strip()
        if key in combined:
            combined[key] = f"{combined[key]}, {value}"
        else:
            combined[key] = value
    return combined


__all__ = ["HttpRequest", "Request", "parse_query"]
