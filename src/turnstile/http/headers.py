"""Immutable HTTP headers with exact-match lookup.

Implements ``Mapping[str, str]``. Names are compared as given: ``Content-Type``
and ``content-type`` are different keys. Duplicate names collapse to the last
value supplied.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-sensitive HTTP headers.

    Accepts a mapping or an iterable of ``(name, value)`` pairs::

        Headers({"Authorization": "bearer_user_token"})
        Headers([("X-Forwarded-For", "10.0.0.1"), ("X-Forwarded-For", "10.0.0.2")])
    """

    __slots__ = ("_items",)

    def __init__(
        self,
        items: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        pairs = items.items() if isinstance(items, Mapping) else (items or ())
        merged: dict[str, str] = {}
        for name, value in pairs:
            merged[str(name)] = str(value)
        object.__setattr__(self, "_items", merged)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Headers are immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._items[key]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._items == other._items
        if isinstance(other, Mapping):
            return self._items == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._items.items()))

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"

    def with_header(self, name: str, value: str) -> Headers:
        """Return new headers with *name* set to *value* (replacing any prior value)."""
        return Headers({**self._items, name: value})

    def merged(self, other: Mapping[str, str]) -> Headers:
        """Return new headers with every entry of *other* applied on top."""
        return Headers({**self._items, **other})
