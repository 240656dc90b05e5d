"""Turnstile — a chain-of-responsibility request pipeline.

Middleware stages inspect, enrich, or reject a request before it reaches a
terminal route handler. Each stage either continues with a (possibly
enriched) context or terminates with a response.

Basic usage::

    from turnstile import PipelineBuilder, Server

    pipeline = (
        PipelineBuilder()
        .logging()
        .rate_limiting(max_requests_per_minute=5)
        .authentication()
        .authorization()
        .validation()
        .build()
    )
    server = Server(pipeline)
    response = server.process("/api/profile", headers={"Authorization": "bearer_user_token"})
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Continue",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "Method",
    "Middleware",
    "MiddlewarePipeline",
    "MiddlewareResult",
    "PathPolicy",
    "PipelineBuilder",
    "RequestContext",
    "RequestHandler",
    "Server",
    "Terminate",
    "TurnstileError",
    "User",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import turnstile`` fast while providing a clean top-level API.
    """
    if name == "Server":
        from turnstile.server import Server

        return Server

    if name in ("MiddlewarePipeline", "PipelineBuilder"):
        from turnstile import pipeline

        return getattr(pipeline, name)

    if name == "RequestHandler":
        from turnstile.handler import RequestHandler

        return RequestHandler

    if name == "RequestContext":
        from turnstile.context import RequestContext

        return RequestContext

    if name in ("Continue", "Terminate", "MiddlewareResult"):
        from turnstile import result

        return getattr(result, name)

    if name == "Middleware":
        from turnstile.middleware.protocol import Middleware

        return Middleware

    if name in ("Headers", "HttpRequest", "HttpResponse", "Method"):
        from turnstile import http

        return getattr(http, name)

    if name == "User":
        from turnstile.identity import User

        return User

    if name == "PathPolicy":
        from turnstile.config import PathPolicy

        return PathPolicy

    if name in ("TurnstileError", "ConfigurationError"):
        from turnstile import errors

        return getattr(errors, name)

    msg = f"module 'turnstile' has no attribute {name!r}"
    raise AttributeError(msg)
