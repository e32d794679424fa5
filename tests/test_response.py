"""Tests for edgekit.http.response — the chainable Response."""

from edgekit.http.response import Response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.body == b""
        assert response.headers == ()

    def test_with_status_returns_new(self) -> None:
        original = Response("x")
        changed = original.with_status(201)
        assert original.status == 200
        assert changed.status == 201

    def test_headers_chain_and_lookup(self) -> None:
        response = Response("x").with_header("X-A", "1").with_headers({"X-B": "2"})
        assert response.headers == (("X-A", "1"), ("X-B", "2"))
        assert response.header("x-a") == "1"
        assert response.header("missing", "d") == "d"

    def test_content_type(self) -> None:
        assert Response(headers=(("Content-Type", "application/json"),)).content_type == "application/json"
        assert Response().content_type is None

    def test_body_conversions(self) -> None:
        assert Response("é").body_bytes == "é".encode()
        assert Response(b"abc").text == "abc"
        assert Response('{"a": [1]}').json() == {"a": [1]}
