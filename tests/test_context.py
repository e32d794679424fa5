"""Tests for edgekit.context — the per-request handler context."""

from edgekit.context import RequestContext
from edgekit.http.headers import Headers
from edgekit.http.query import QueryParams
from edgekit.http.request import Request


class TestRequestContext:
    def test_seeded_with_raw_values(self) -> None:
        request = Request(
            method="GET",
            path="/",
            headers=Headers([("X-Trace", "1")]),
            query=QueryParams.parse("a=1&a=2"),
        )
        ctx = RequestContext.from_request(request)
        assert ctx.request is request
        assert ctx.params == {"a": "2"}
        assert ctx.headers == {"x-trace": "1"}
        assert ctx.body is None
        assert ctx.files is None
        assert ctx.fields is None
        assert ctx.form_data is None

    def test_mutable(self) -> None:
        request = Request(method="GET", path="/", headers=Headers(), query=QueryParams())
        ctx = RequestContext.from_request(request)
        ctx.body = {"x": 1}
        assert ctx.body == {"x": 1}
