"""Immutable HTTP request record.

The pipeline never sees raw bytes: a request arrives already parsed into
method, path, headers and a text body, and stays that way.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from turnstile.http.headers import Headers


class Method(StrEnum):
    """HTTP methods the pipeline knows by name."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """An immutable HTTP request.

    ``method`` is normalised to upper case. Verbs outside ``Method`` are kept
    as plain strings so extension methods still flow through the pipeline.
    """

    path: str
    method: str = Method.GET
    headers: Headers = field(default_factory=Headers)
    body: str = ""

    def __post_init__(self) -> None:
        method = str(self.method).upper()
        try:
            method = Method(method)
        except ValueError:
            pass
        object.__setattr__(self, "method", method)
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The ``Content-Type`` header value."""
        return self.headers.get("Content-Type")

    @property
    def authorization(self) -> str | None:
        """The ``Authorization`` header value."""
        return self.headers.get("Authorization")

    # -- Factory --

    @classmethod
    def build(
        cls,
        path: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: str = "",
    ) -> HttpRequest:
        """Create a request from plain values."""
        return cls(path=path, method=method, headers=Headers(headers), body=body)
