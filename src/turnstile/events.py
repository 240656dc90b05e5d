"""Pipeline events.

Stages report what they decided (request started, client throttled, token
rejected, request completed) as ``PipelineEvent`` values. Each event is cut
from the ``RequestContext`` the stage was holding at that moment, so the path,
method, request id and resolved user always agree with what the pipeline saw.

Delivery is opt-in. A stage built with its own sink sends there; otherwise the
process-wide sink from ``set_event_sink`` is used, and with neither nothing is
built at all.
"""

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from time import time
from typing import Any

from turnstile.context import REQUEST_ID_KEY, RequestContext


@dataclass(frozen=True, slots=True)
class PipelineEvent:
    """One stage decision, tied to the request it was made for.

    ``request_id`` is ``None`` until the logging stage has stamped the
    context, and ``user_id`` until authentication has attached a user.
    """

    name: str
    path: str
    method: str
    request_id: str | None = None
    user_id: str | None = None
    details: Mapping[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)

    @classmethod
    def from_context(
        cls,
        name: str,
        context: RequestContext,
        details: Mapping[str, Any] | None = None,
    ) -> "PipelineEvent":
        request, user = context.request, context.user
        request_id = context.metadata.get(REQUEST_ID_KEY)
        return cls(
            name=name,
            path=request.path,
            method=str(request.method),
            request_id=str(request_id) if request_id is not None else None,
            user_id=user.id if user is not None else None,
            details=dict(details or {}),
        )


type EventSink = Callable[[PipelineEvent], None]


_sink_lock = threading.Lock()
_sink: EventSink | None = None


def set_event_sink(sink: EventSink | None) -> None:
    """Install the process-wide sink. ``None`` turns delivery off."""
    global _sink
    with _sink_lock:
        _sink = sink


def get_event_sink() -> EventSink | None:
    with _sink_lock:
        return _sink


def emit_event(
    name: str,
    context: RequestContext,
    *,
    details: Mapping[str, Any] | None = None,
    sink: EventSink | None = None,
) -> None:
    """Report *name* for *context* to *sink*, or to the process-wide sink."""
    if sink is None:
        sink = get_event_sink()
    if sink is None:
        return
    sink(PipelineEvent.from_context(name, context, details))
