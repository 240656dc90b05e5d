"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new HttpResponse. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from turnstile.http.headers import Headers


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """An HTTP response built through immutable transformations.

    Construct with a status and body, then chain ``.with_*()`` calls to
    adjust it. Each call returns a new ``HttpResponse``.
    """

    status: int = 200
    body: str = ""
    headers: Headers = field(default_factory=Headers)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))

    # -- Chainable transformations --

    def with_status(self, status: int) -> HttpResponse:
        """Return a new HttpResponse with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> HttpResponse:
        """Return a new HttpResponse with *name* set to *value*."""
        return replace(self, headers=self.headers.with_header(name, value))

    def with_headers(self, headers: Mapping[str, str]) -> HttpResponse:
        """Return a new HttpResponse with additional headers."""
        return replace(self, headers=self.headers.merged(headers))

    def with_body(self, body: str) -> HttpResponse:
        """Return a new HttpResponse with a different body."""
        return replace(self, body=body)

    # -- Status helpers --

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300
