"""Middleware protocol.

A middleware is any callable matching::

    def my_mw(context: RequestContext) -> MiddlewareResult: ...

No base class required. The pipeline checks the shape, not the lineage.
"""

from typing import Protocol

from turnstile.context import RequestContext
from turnstile.result import MiddlewareResult


class Middleware(Protocol):
    """Protocol for turnstile middleware.

    Accepts both functions and callable objects::

        # Function middleware
        def tag(context: RequestContext) -> MiddlewareResult:
            return context.with_metadata("tagged", True).proceed()

        # Class middleware
        class Maintenance:
            def __call__(self, context: RequestContext) -> MiddlewareResult:
                return context.terminate(503, "Down for maintenance")
    """

    def __call__(self, context: RequestContext) -> MiddlewareResult: ...
