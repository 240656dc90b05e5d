"""Tests for turnstile.http.request — HttpRequest and Method."""

import dataclasses

import pytest

from turnstile.http.headers import Headers
from turnstile.http.request import HttpRequest, Method


class TestHttpRequest:
    def test_defaults(self) -> None:
        request = HttpRequest("/health")
        assert request.method == Method.GET
        assert request.headers == Headers()
        assert request.body == ""

    def test_method_is_normalised(self) -> None:
        request = HttpRequest("/api/items", method="post")
        assert request.method is Method.POST
        assert request.method == "POST"

    def test_unknown_method_kept_as_string(self) -> None:
        request = HttpRequest("/api/items", method="purge")
        assert request.method == "PURGE"
        assert not isinstance(request.method, Method)

    def test_plain_mapping_headers_are_wrapped(self) -> None:
        request = HttpRequest("/", headers={"Content-Type": "application/json"})  # type: ignore[arg-type]
        assert isinstance(request.headers, Headers)
        assert request.content_type == "application/json"

    def test_build(self) -> None:
        request = HttpRequest.build(
            "/api/profile", "GET", {"Authorization": "bearer_user_token"}, "x"
        )
        assert request.authorization == "bearer_user_token"
        assert request.body == "x"

    def test_build_without_headers(self) -> None:
        request = HttpRequest.build("/health")
        assert request.authorization is None
        assert request.content_type is None

    def test_frozen(self) -> None:
        request = HttpRequest("/health")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.path = "/other"  # type: ignore[misc]

    def test_equality(self) -> None:
        a = HttpRequest.build("/x", "GET", {"A": "1"})
        b = HttpRequest.build("/x", "get", {"A": "1"})
        assert a == b
