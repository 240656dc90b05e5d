"""Request shape validation middleware.

Two rules, checked in order:

1. API writes (``POST``/``PUT`` under the API prefix) must declare the
   required ``Content-Type`` exactly, or the request is rejected with 400.
2. Any body longer than ``max_body_size`` characters is rejected with 413.
"""

import logging
from dataclasses import dataclass

from turnstile.context import RequestContext
from turnstile.errors import ConfigurationError
from turnstile.events import EventSink, emit_event
from turnstile.http.request import HttpRequest
from turnstile.result import MiddlewareResult

logger = logging.getLogger("turnstile.validation")


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Validation limits. The defaults are the fixed production values."""

    max_body_size: int = 1_000_000
    required_content_type: str = "application/json"
    api_prefix: str = "/api"
    methods: tuple[str, ...] = ("POST", "PUT")

    def __post_init__(self) -> None:
        if self.max_body_size < 0:
            msg = f"max_body_size must not be negative, got {self.max_body_size}"
            raise ConfigurationError(msg)


class ValidationMiddleware:
    """Rejects malformed requests before they reach a handler."""

    __slots__ = ("_config", "_sink")

    def __init__(
        self,
        config: ValidationConfig | None = None,
        *,
        sink: EventSink | None = None,
    ) -> None:
        self._config = config or ValidationConfig()
        self._sink = sink

    def _needs_content_type(self, request: HttpRequest) -> bool:
        cfg = self._config
        return request.path.startswith(cfg.api_prefix) and request.method in cfg.methods

    def _reject(self, context: RequestContext, status: int, body: str, rule: str) -> MiddlewareResult:
        emit_event(
            "validation.rejected",
            context,
            details={"rule": rule, "status": status},
            sink=self._sink,
        )
        return context.terminate(status, body)

    def __call__(self, context: RequestContext) -> MiddlewareResult:
        cfg = self._config
        request = context.request

        if self._needs_content_type(request) and request.content_type != cfg.required_content_type:
            logger.warning("Invalid content type: %s", request.content_type)
            return self._reject(
                context,
                400,
                f"Content-Type must be {cfg.required_content_type} for API requests",
                "content_type",
            )

        if len(request.body) > cfg.max_body_size:
            logger.warning("Request body too large: %d characters", len(request.body))
            return self._reject(context, 413, "Request body too large", "body_size")

        logger.debug("Request validation passed")
        return context.proceed()
