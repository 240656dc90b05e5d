"""Server facade — the single entry point for callers.

Wires a built pipeline to a ``RequestHandler``. ``process()`` is synchronous
and holds no per-call state, so one ``Server`` can serve many threads at
once; ``process_async()`` offers the same call to async transports by
running it on an anyio worker thread.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import assert_never

from anyio import to_thread

from turnstile.context import RequestContext
from turnstile.http.request import HttpRequest
from turnstile.http.response import HttpResponse
from turnstile.pipeline import MiddlewarePipeline, PipelineBuilder
from turnstile.result import Continue, Terminate


class Server:
    """Runs requests through a pipeline, then the terminal handler.

    Usage::

        server = Server.configure(
            lambda b: b.logging().rate_limiting(5).authentication().authorization().validation()
        )
        response = server.process("/api/profile", headers={"Authorization": "bearer_user_token"})
    """

    __slots__ = ("_handler", "_pipeline")

    def __init__(
        self,
        pipeline: MiddlewarePipeline,
        handler: Callable[[RequestContext], HttpResponse] | None = None,
    ) -> None:
        if handler is None:
            from turnstile.handler import RequestHandler

            handler = RequestHandler()
        self._pipeline = pipeline
        self._handler = handler

    @classmethod
    def configure(
        cls,
        setup: Callable[[PipelineBuilder], object],
        *,
        builder: PipelineBuilder | None = None,
        handler: Callable[[RequestContext], HttpResponse] | None = None,
    ) -> Server:
        """Build a server from a function that adds stages to a builder.

        Without an explicit *handler*, the default ``RequestHandler`` shares
        the builder's path policy, clock and event sink, so the admin gate
        and elapsed-time reporting agree with the stages.
        """
        if builder is None:
            builder = PipelineBuilder()
        setup(builder)
        if handler is None:
            from turnstile.handler import RequestHandler

            handler = RequestHandler(
                policy=builder.policy, clock=builder.clock, sink=builder.sink
            )
        return cls(builder.build(), handler)

    @property
    def pipeline(self) -> MiddlewarePipeline:
        return self._pipeline

    @property
    def handler(self) -> Callable[[RequestContext], HttpResponse]:
        return self._handler

    def process(
        self,
        path: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: str = "",
    ) -> HttpResponse:
        """Process one request and return its response."""
        request = HttpRequest.build(path, method, headers, body)
        return self.process_request(request)

    def process_request(self, request: HttpRequest) -> HttpResponse:
        """Process an already-built ``HttpRequest``."""
        result = self._pipeline.execute(RequestContext.for_request(request))
        match result:
            case Continue(context=context):
                return self._handler(context)
            case Terminate(response=response):
                return response
            case _:
                assert_never(result)

    async def process_async(
        self,
        path: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: str = "",
    ) -> HttpResponse:
        """Process one request on a worker thread, for async callers."""
        request = HttpRequest.build(path, method, headers, body)
        return await to_thread.run_sync(self.process_request, request)
