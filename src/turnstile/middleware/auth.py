"""Authentication middleware — bearer token lookup.

Resolves the ``Authorization`` header against an ``IdentityStore`` and
attaches the user to the context. Public paths skip the check entirely.

Usage::

    from turnstile.identity import StaticIdentityStore
    from turnstile.middleware.auth import AuthenticationMiddleware

    builder.use(AuthenticationMiddleware(StaticIdentityStore()))

The header value itself is the lookup key; there is no scheme parsing.
"""

import logging

from turnstile.config import DEFAULT_POLICY, PathPolicy
from turnstile.context import RequestContext
from turnstile.events import EventSink, emit_event
from turnstile.identity import IdentityStore, StaticIdentityStore
from turnstile.result import MiddlewareResult

logger = logging.getLogger("turnstile.auth")

TOKEN_HEADER = "Authorization"


class AuthenticationMiddleware:
    """Terminates with 401 unless a protected request carries a known token.

    Outcomes for protected paths:

    - no ``Authorization`` header: 401 "Authentication required"
    - header not in the store: 401 "Invalid token"
    - header found: continue with the user attached
    """

    __slots__ = ("_policy", "_sink", "_store")

    def __init__(
        self,
        store: IdentityStore | None = None,
        *,
        policy: PathPolicy = DEFAULT_POLICY,
        sink: EventSink | None = None,
    ) -> None:
        self._store: IdentityStore = store if store is not None else StaticIdentityStore()
        self._policy = policy
        self._sink = sink

    @property
    def store(self) -> IdentityStore:
        return self._store

    def __call__(self, context: RequestContext) -> MiddlewareResult:
        request = context.request

        if self._policy.is_public(request.path):
            logger.debug("Public endpoint %s, skipping authentication", request.path)
            return context.proceed()

        token = request.headers.get(TOKEN_HEADER)
        if token is None:
            logger.warning("Missing authentication token for %s", request.path)
            emit_event("auth.missing", context, sink=self._sink)
            return context.terminate(401, "Authentication required")

        user = self._store.lookup(token)
        if user is None:
            logger.warning("Invalid authentication token for %s", request.path)
            emit_event("auth.invalid", context, sink=self._sink)
            return context.terminate(401, "Invalid token")

        logger.debug("Authenticated user: %s (%s)", user.id, user.role)
        authenticated = context.with_user(user)
        emit_event("auth.success", authenticated, sink=self._sink)
        return authenticated.proceed()
