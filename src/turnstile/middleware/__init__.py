"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    def mw(context: RequestContext) -> MiddlewareResult

Built-in middleware:
    LoggingMiddleware -- Request log line, request id and start time
    RateLimitingMiddleware -- Sliding-window per-client limits (429)
    AuthenticationMiddleware -- Bearer token lookup (401)
    AuthorizationMiddleware -- Method-based permission checks (403)
    ValidationMiddleware -- Content-Type and body size rules (400/413)
"""

from turnstile.middleware.auth import AuthenticationMiddleware
from turnstile.middleware.permissions import AuthorizationMiddleware, required_permission
from turnstile.middleware.protocol import Middleware
from turnstile.middleware.rate_limit import (
    InMemoryRateTracker,
    RateLimitConfig,
    RateLimitingMiddleware,
    RateTracker,
)
from turnstile.middleware.request_log import LoggingMiddleware, RequestIdFactory
from turnstile.middleware.validation import ValidationConfig, ValidationMiddleware

__all__ = [
    "AuthenticationMiddleware",
    "AuthorizationMiddleware",
    "InMemoryRateTracker",
    "LoggingMiddleware",
    "Middleware",
    "RateLimitConfig",
    "RateLimitingMiddleware",
    "RateTracker",
    "RequestIdFactory",
    "ValidationConfig",
    "ValidationMiddleware",
    "required_permission",
]
