"""Users and the identity store that resolves credentials to them.

The store is a seam: the in-memory table here stands in for a real identity
provider, and tests substitute their own implementation of ``IdentityStore``.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class User:
    """An authenticated principal."""

    id: str
    role: str
    permissions: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.permissions, frozenset):
            object.__setattr__(self, "permissions", frozenset(self.permissions))

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@runtime_checkable
class IdentityStore(Protocol):
    """Resolves a credential to a user.

    Any object with a matching ``lookup`` satisfies this.
    """

    def lookup(self, token: str) -> User | None: ...


DEFAULT_USERS: Mapping[str, User] = {
    "bearer_admin_token": User("admin", "admin", frozenset({"read", "write", "delete"})),
    "bearer_user_token": User("user123", "user", frozenset({"read"})),
    "bearer_guest_token": User("guest", "guest", frozenset()),
}


class StaticIdentityStore:
    """Fixed token → user table held in memory.

    Usage::

        store = StaticIdentityStore({"secret": User("ops", "admin", {"read"})})
        store.lookup("secret")
    """

    __slots__ = ("_users",)

    def __init__(
        self,
        users: Mapping[str, User] | Iterable[tuple[str, User]] | None = None,
    ) -> None:
        self._users: dict[str, User] = dict(DEFAULT_USERS if users is None else users)

    def lookup(self, token: str) -> User | None:
        return self._users.get(token)

    def __contains__(self, token: object) -> bool:
        return token in self._users

    def __len__(self) -> int:
        return len(self._users)
