"""Tests for edgekit.server.sender response emission rules."""

from edgekit.http.response import Response
from edgekit.server.sender import send_response


async def _send(response: Response) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send)
    return messages


class TestSendResponse:
    async def test_200_preserves_body(self) -> None:
        messages = await _send(Response("ok", headers=(("Content-Type", "text/plain"),)))
        start, body = messages
        assert start["type"] == "http.response.start"
        assert start["status"] == 200
        headers = dict(start["headers"])
        assert headers[b"content-type"] == b"text/plain"
        assert headers[b"content-length"] == b"2"
        assert body == {"type": "http.response.body", "body": b"ok"}

    async def test_utf8_length(self) -> None:
        messages = await _send(Response("é"))
        assert dict(messages[0]["headers"])[b"content-length"] == b"2"

    async def test_204_drops_body(self) -> None:
        messages = await _send(Response("unexpected").with_status(204))
        assert dict(messages[0]["headers"])[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_304_drops_body(self) -> None:
        messages = await _send(Response("unexpected").with_status(304))
        assert messages[1]["body"] == b""

    async def test_stale_content_length_replaced(self) -> None:
        messages = await _send(Response("abc", headers=(("Content-Length", "99"),)))
        lengths = [v for k, v in messages[0]["headers"] if k == b"content-length"]
        assert lengths == [b"3"]
