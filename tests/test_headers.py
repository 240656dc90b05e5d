"""Tests for turnstile.http.headers — immutable, case-sensitive Headers."""

import pytest

from turnstile.http.headers import Headers


class TestHeaders:
    def test_getitem(self) -> None:
        h = Headers({"Content-Type": "application/json"})
        assert h["Content-Type"] == "application/json"

    def test_lookup_is_case_sensitive(self) -> None:
        h = Headers({"Authorization": "bearer_user_token"})
        assert "authorization" not in h
        assert h.get("AUTHORIZATION") is None

    def test_missing_key_raises(self) -> None:
        h = Headers({"Accept": "*/*"})
        with pytest.raises(KeyError):
            h["X-Missing"]

    def test_contains_rejects_non_str(self) -> None:
        h = Headers({"Accept": "*/*"})
        assert 42 not in h  # type: ignore[operator]

    def test_duplicate_pairs_last_write_wins(self) -> None:
        h = Headers([("X-Forwarded-For", "10.0.0.1"), ("X-Forwarded-For", "10.0.0.2")])
        assert h["X-Forwarded-For"] == "10.0.0.2"
        assert len(h) == 1

    def test_get_with_default(self) -> None:
        h = Headers({"Accept": "*/*"})
        assert h.get("Accept") == "*/*"
        assert h.get("X-Missing") is None
        assert h.get("X-Missing", "fallback") == "fallback"

    def test_empty(self) -> None:
        assert len(Headers()) == 0
        assert len(Headers(None)) == 0

    def test_immutable(self) -> None:
        h = Headers({"Accept": "*/*"})
        with pytest.raises(AttributeError):
            h.extra = "nope"  # type: ignore[attr-defined]
        with pytest.raises(TypeError):
            h["Accept"] = "text/html"  # type: ignore[index]

    def test_source_mapping_changes_do_not_leak(self) -> None:
        source = {"Accept": "*/*"}
        h = Headers(source)
        source["Accept"] = "text/html"
        assert h["Accept"] == "*/*"

    def test_with_header_returns_copy(self) -> None:
        h = Headers({"Accept": "*/*"})
        h2 = h.with_header("Accept", "text/html")
        assert h["Accept"] == "*/*"
        assert h2["Accept"] == "text/html"

    def test_merged(self) -> None:
        h = Headers({"A": "1", "B": "2"}).merged({"B": "3", "C": "4"})
        assert dict(h) == {"A": "1", "B": "3", "C": "4"}

    def test_equality_with_mapping(self) -> None:
        assert Headers({"A": "1"}) == {"A": "1"}
        assert Headers({"A": "1"}) == Headers([("A", "1")])
        assert Headers({"A": "1"}) != Headers({"a": "1"})

    def test_hashable(self) -> None:
        assert hash(Headers({"A": "1"})) == hash(Headers({"A": "1"}))

    def test_repr(self) -> None:
        assert repr(Headers({"A": "1"})) == "Headers({'A': '1'})"
