"""Authorization middleware — method-based permission checks.

Must run after ``AuthenticationMiddleware``: it only reads the user that
authentication attached. Placed first, it denies every protected request.
"""

import logging

from turnstile.config import DEFAULT_POLICY, PathPolicy
from turnstile.context import RequestContext
from turnstile.events import EventSink, emit_event
from turnstile.result import MiddlewareResult

logger = logging.getLogger("turnstile.auth")

_METHOD_PERMISSIONS: dict[str, str] = {
    "GET": "read",
    "POST": "write",
    "PUT": "write",
    "DELETE": "delete",
}


def required_permission(method: str) -> str:
    """Map an HTTP method to the permission it needs. Unknown methods need ``read``."""
    return _METHOD_PERMISSIONS.get(str(method).upper(), "read")


class AuthorizationMiddleware:
    """Terminates with 403 when the user lacks the method's permission."""

    __slots__ = ("_policy", "_sink")

    def __init__(
        self,
        *,
        policy: PathPolicy = DEFAULT_POLICY,
        sink: EventSink | None = None,
    ) -> None:
        self._policy = policy
        self._sink = sink

    def __call__(self, context: RequestContext) -> MiddlewareResult:
        request = context.request

        if self._policy.is_public(request.path):
            return context.proceed()

        user = context.user
        if user is None:
            emit_event(
                "authz.denied",
                context,
                details={"reason": "unauthenticated"},
                sink=self._sink,
            )
            return context.terminate(403, "Access denied")

        permission = required_permission(request.method)
        if user.has_permission(permission):
            logger.debug("Authorization check passed for %s", user.id)
            return context.proceed()

        logger.warning(
            "User %s lacks %s permission for %s %s",
            user.id,
            permission,
            request.method,
            request.path,
        )
        emit_event(
            "authz.denied",
            context,
            details={"reason": "permission", "permission": permission},
            sink=self._sink,
        )
        return context.terminate(403, "Insufficient permissions")
