"""Per-request context threaded through the pipeline.

A ``RequestContext`` is never changed in place. Stages that pass data forward
derive a new context with ``with_user()`` or ``with_metadata()``; the parent
value stays valid, so contexts can be shared between threads without locks.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from turnstile.http.request import HttpRequest
from turnstile.http.response import HttpResponse
from turnstile.identity import User

if TYPE_CHECKING:
    from turnstile.result import Continue, Terminate

_EMPTY: Mapping[str, Any] = MappingProxyType({})

REQUEST_ID_KEY = "request_id"
START_TIME_KEY = "start_time"


@dataclass(frozen=True, slots=True)
class RequestContext:
    """The request, the resolved user (if any), and a bag of metadata.

    ``metadata`` is exposed as a read-only mapping. Well-known keys:

    - ``request_id``: set by the logging stage
    - ``start_time``: monotonic seconds, set by the logging stage
    """

    request: HttpRequest
    user: User | None = None
    metadata: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    def __post_init__(self) -> None:
        # A proxy is only a view; copy so the caller keeps no handle on our data.
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    # -- Copy-with-change --

    def with_user(self, user: User) -> RequestContext:
        """Return a new context carrying *user*."""
        return replace(self, user=user)

    def with_metadata(
        self,
        entries: Mapping[str, Any] | str | None = None,
        value: Any = None,
        /,
        **extra: Any,
    ) -> RequestContext:
        """Return a new context with metadata entries added or replaced.

        Accepts a single key and value, a mapping, keyword arguments, or a
        mix of a mapping and keywords::

            ctx.with_metadata("request_id", "req_1")
            ctx.with_metadata({"request_id": "req_1", "start_time": 0.0})
            ctx.with_metadata(request_id="req_1")
        """
        merged = dict(self.metadata)
        if isinstance(entries, str):
            merged[entries] = value
        elif entries is not None:
            merged.update(entries)
        merged.update(extra)
        return replace(self, metadata=merged)

    # -- Result shortcuts --

    def proceed(self) -> Continue:
        """Continue the pipeline with this context."""
        from turnstile.result import Continue

        return Continue(self)

    def terminate(
        self,
        status: int,
        body: str,
        headers: Mapping[str, str] | None = None,
    ) -> Terminate:
        """Stop the pipeline and answer with the given response."""
        from turnstile.result import Terminate

        return Terminate(HttpResponse(status=status, body=body, headers=headers))

    @classmethod
    def for_request(cls, request: HttpRequest) -> RequestContext:
        """Create the initial context for *request*."""
        return cls(request=request)
