"""Middleware results: continue with a context, or terminate with a response.

The two variants are separate frozen types joined by ``MiddlewareResult``.
Consumers match on them exhaustively::

    match result:
        case Continue(context):
            ...
        case Terminate(response):
            ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from turnstile.http.response import HttpResponse

if TYPE_CHECKING:
    from turnstile.context import RequestContext


@dataclass(frozen=True, slots=True)
class Continue:
    """Hand *context* to the next stage."""

    context: RequestContext

    def on_continue(self, action: Callable[[RequestContext], object]) -> Continue:
        action(self.context)
        return self

    def on_terminate(self, action: Callable[[HttpResponse], object]) -> Continue:  # noqa: ARG002
        return self


@dataclass(frozen=True, slots=True)
class Terminate:
    """Stop the pipeline; *response* is the final answer."""

    response: HttpResponse

    def on_continue(self, action: Callable[[RequestContext], object]) -> Terminate:  # noqa: ARG002
        return self

    def on_terminate(self, action: Callable[[HttpResponse], object]) -> Terminate:
        action(self.response)
        return self


type MiddlewareResult = Continue | Terminate
