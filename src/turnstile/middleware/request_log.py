"""Request logging middleware.

Logs every request and stamps the context with a request id and a start
time, which the handler later uses to report elapsed time.
"""

import itertools
import logging
import threading
import time
from collections.abc import Callable

from turnstile.context import REQUEST_ID_KEY, START_TIME_KEY, RequestContext
from turnstile.events import EventSink, emit_event
from turnstile.result import MiddlewareResult

logger = logging.getLogger("turnstile.access")

__all__ = ["REQUEST_ID_KEY", "START_TIME_KEY", "LoggingMiddleware", "RequestIdFactory"]


class RequestIdFactory:
    """Generates ``req_<epoch-ms>_<n>`` ids, unique for the process lifetime."""

    __slots__ = ("_counter", "_lock")

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"req_{int(time.time() * 1000)}_{n}"


class LoggingMiddleware:
    """Always continues. Records who asked for what.

    Usage::

        builder.use(LoggingMiddleware())
    """

    __slots__ = ("_clock", "_next_id", "_sink")

    def __init__(
        self,
        *,
        request_ids: Callable[[], str] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sink: EventSink | None = None,
    ) -> None:
        self._next_id = request_ids or RequestIdFactory()
        self._clock = clock
        self._sink = sink

    def __call__(self, context: RequestContext) -> MiddlewareResult:
        request = context.request
        request_id = self._next_id()
        logger.info("%s %s", request.method, request.path, extra={"request_id": request_id})
        stamped = context.with_metadata(
            {START_TIME_KEY: self._clock(), REQUEST_ID_KEY: request_id}
        )
        emit_event("request.started", stamped, sink=self._sink)
        return stamped.proceed()
