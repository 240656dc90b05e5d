"""Terminal request handler.

Runs only when every middleware continued. Dispatch order:

1. exact match in the route table
2. special prefix routes (admin area, gated on the ``admin`` role)
3. 404 "Not found"

Route functions receive the request and the resolved user (``None`` on
public paths) and return an ``HttpResponse``. Exceptions they raise are
programmer errors and propagate to the caller.
"""

import logging
import time
from collections.abc import Callable, Mapping

from turnstile.config import DEFAULT_POLICY, PathPolicy
from turnstile.context import REQUEST_ID_KEY, START_TIME_KEY, RequestContext
from turnstile.events import EventSink, emit_event
from turnstile.http.request import HttpRequest
from turnstile.http.response import HttpResponse
from turnstile.identity import User

logger = logging.getLogger("turnstile.handler")

type RouteHandler = Callable[[HttpRequest, User | None], HttpResponse]


def _health(request: HttpRequest, user: User | None) -> HttpResponse:  # noqa: ARG001
    return HttpResponse(200, "OK")


def _public_info(request: HttpRequest, user: User | None) -> HttpResponse:  # noqa: ARG001
    return HttpResponse(200, "Public information")


def _profile(request: HttpRequest, user: User | None) -> HttpResponse:  # noqa: ARG001
    return HttpResponse(200, f"Profile for user {user.id if user else None}")


DEFAULT_ROUTES: Mapping[str, RouteHandler] = {
    "/health": _health,
    "/public/info": _public_info,
    "/api/profile": _profile,
}


class RequestHandler:
    """Route table lookup plus role-gated special routes.

    Usage::

        handler = RequestHandler()

        @handler.route("/api/orders")
        def orders(request, user):
            return HttpResponse(200, "[]")
    """

    __slots__ = ("_clock", "_policy", "_routes", "_sink")

    def __init__(
        self,
        routes: Mapping[str, RouteHandler] | None = None,
        *,
        policy: PathPolicy = DEFAULT_POLICY,
        clock: Callable[[], float] = time.monotonic,
        sink: EventSink | None = None,
    ) -> None:
        self._routes: dict[str, RouteHandler] = dict(DEFAULT_ROUTES if routes is None else routes)
        self._policy = policy
        self._clock = clock
        self._sink = sink

    @property
    def routes(self) -> Mapping[str, RouteHandler]:
        return dict(self._routes)

    def add_route(self, path: str, func: RouteHandler) -> None:
        """Register *func* for the exact *path*, replacing any existing route."""
        self._routes[path] = func

    def route(self, path: str) -> Callable[[RouteHandler], RouteHandler]:
        """Decorator form of ``add_route``."""

        def decorator(func: RouteHandler) -> RouteHandler:
            self.add_route(path, func)
            return func

        return decorator

    def _special_route(self, request: HttpRequest, user: User | None) -> HttpResponse | None:
        if self._policy.is_admin(request.path):
            if user is not None and user.is_admin:
                return HttpResponse(200, "Admin data")
            return HttpResponse(403, "Admin access required")
        return None

    def _elapsed_ms(self, context: RequestContext) -> float:
        start = context.metadata.get(START_TIME_KEY)
        if not isinstance(start, (int, float)):
            return 0.0
        return (self._clock() - start) * 1000

    def handle(self, context: RequestContext) -> HttpResponse:
        """Produce the final response for a context that cleared the pipeline."""
        request, user = context.request, context.user
        logger.debug(
            "Processing request %s (%.1fms so far)",
            context.metadata.get(REQUEST_ID_KEY),
            self._elapsed_ms(context),
        )

        func = self._routes.get(request.path)
        if func is not None:
            response = func(request, user)
            if not isinstance(response, HttpResponse):
                name = getattr(func, "__name__", repr(func))
                msg = (
                    f"Route {request.path!r} ({name}) returned "
                    f"{type(response).__name__}, expected HttpResponse"
                )
                raise TypeError(msg)
        else:
            response = self._special_route(request, user) or HttpResponse(404, "Not found")

        elapsed_ms = self._elapsed_ms(context)
        logger.info("Returning %d response for %s %s", response.status, request.method, request.path)
        emit_event(
            "request.completed",
            context,
            details={"status": response.status, "elapsed_ms": elapsed_ms},
            sink=self._sink,
        )
        return response

    __call__ = handle
