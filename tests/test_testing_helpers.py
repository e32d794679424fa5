"""Tests for edgekit.testing — the in-process client and multipart encoder."""

from edgekit.app import App
from edgekit.testing import TestClient, encode_multipart


def _echo_app() -> App:
    app = App()

    @app.route("/echo")
    async def echo(ctx):
        return {
            "method": ctx.request.method,
            "params": ctx.params,
            "content_type": ctx.headers.get("content-type"),
            "body": (await ctx.request.body()).decode(),
        }

    return app


class TestEncodeMultipart:
    def test_content_type_carries_boundary(self) -> None:
        _, content_type = encode_multipart({"a": "1"}, boundary="xyz")
        assert content_type == "multipart/form-data; boundary=xyz"

    def test_body_layout(self) -> None:
        body, _ = encode_multipart({"a": "1"}, {"f": ("f.txt", b"data", "text/plain")}, boundary="xyz")
        assert body.startswith(b'--xyz\r\nContent-Disposition: form-data; name="a"\r\n\r\n1\r\n')
        assert b'name="f"; filename="f.txt"\r\nContent-Type: text/plain\r\n\r\ndata\r\n' in body
        assert body.endswith(b"--xyz--\r\n")


class TestTestClient:
    async def test_verbs(self) -> None:
        async with TestClient(_echo_app()) as client:
            for verb in ("get", "post", "put", "patch", "delete"):
                response = await getattr(client, verb)("/echo")
                assert response.json()["method"] == verb.upper()

    async def test_query_merging(self) -> None:
        async with TestClient(_echo_app()) as client:
            response = await client.get("/echo?a=1", query={"b": "2"})
        assert response.json()["params"] == {"a": "1", "b": "2"}

    async def test_json_body(self) -> None:
        async with TestClient(_echo_app()) as client:
            response = await client.post("/echo", json={"x": 1})
        data = response.json()
        assert data["content_type"] == "application/json"
        assert data["body"] == '{"x": 1}'

    async def test_chunked_body(self) -> None:
        async with TestClient(_echo_app()) as client:
            response = await client.post("/echo", body=b"abcdef", chunk_size=2)
        assert response.json()["body"] == "abcdef"

    async def test_multipart(self) -> None:
        async with TestClient(_echo_app()) as client:
            response = await client.post("/echo", data={"a": "1"})
        assert response.json()["content_type"].startswith("multipart/form-data; boundary=")

    async def test_content_length_not_exposed(self) -> None:
        async with TestClient(_echo_app()) as client:
            response = await client.get("/echo")
        assert response.header("content-length") is None
