"""Tests for edgekit.app — full dispatch pipeline through the ASGI entry."""

import pytest
from pydantic import BaseModel

from edgekit.app import App
from edgekit.config import AppConfig
from edgekit.context import RequestContext
from edgekit.http.forms import UploadFile
from edgekit.http.request import Request
from edgekit.http.response import Response
from edgekit.middleware import BearerAuth
from edgekit.results import UNDEFINED, Shaped
from edgekit.testing import TestClient, encode_multipart


class Item(BaseModel):
    name: str
    qty: int


class Upload(BaseModel):
    file: UploadFile
    name: str


class Out(BaseModel):
    id: int


class TestRegistration:
    def test_routes_in_order(self) -> None:
        app = App()
        app.get("/a", lambda ctx: {})
        app.group("/api").post("/b", lambda ctx: {})
        assert [(r.path, r.methods) for r in app.routes] == [
            ("/a", frozenset({"GET"})),
            ("/api/b", frozenset({"POST"})),
        ]

    async def test_register_after_freeze_raises(self) -> None:
        app = App()
        app.get("/a", lambda ctx: {})
        async with TestClient(app) as client:
            await client.get("/a")
        with pytest.raises(RuntimeError):
            app.get("/late", lambda ctx: {})

    def test_default_config(self) -> None:
        app = App()
        assert app.config == AppConfig()
        assert app.config.json_indent == 2


class TestPreflight:
    async def test_options_on_unknown_path(self) -> None:
        app = App()
        async with TestClient(app) as client:
            response = await client.options("/nowhere")
        assert response.status == 204
        assert response.body == b""
        assert response.header("access-control-allow-origin") == "*"
        assert response.header("access-control-allow-methods") == "GET, POST, PUT, DELETE, OPTIONS"
        assert (
            response.header("access-control-allow-headers")
            == "authorization, x-client-info, apikey, content-type"
        )

    async def test_options_skips_middleware_and_handler(self) -> None:
        hits: list[str] = []

        async def mw(request, ctx, next):
            hits.append("mw")
            return await next()

        app = App()
        app.use(mw)
        app.route("/x", lambda ctx: hits.append("handler"))
        async with TestClient(app) as client:
            response = await client.options("/x")
        assert response.status == 204
        assert hits == []


class TestRoutingErrors:
    async def test_404_envelope(self) -> None:
        app = App()
        async with TestClient(app) as client:
            response = await client.get("/missing")
        assert response.status == 404
        assert response.json() == {"success": False, "error": "Not Found"}
        assert response.header("content-type") == "application/json"
        assert response.header("access-control-allow-origin") == "*"

    async def test_405_with_allow(self) -> None:
        app = App()
        app.get("/items", lambda ctx: [])
        async with TestClient(app) as client:
            response = await client.delete("/items")
        assert response.status == 405
        assert response.header("allow") == "GET"
        assert response.json()["success"] is False

    async def test_first_registered_wins(self) -> None:
        app = App()
        app.get("/dup", lambda ctx: "first")
        app.get("/dup", lambda ctx: "second")
        async with TestClient(app) as client:
            response = await client.get("/dup")
        assert response.text == "first"


class TestValidation:
    async def test_body_schema_failure(self) -> None:
        app = App()
        app.post("/items", lambda ctx: ctx.body, body_schema=Item)
        async with TestClient(app) as client:
            response = await client.post("/items", json={"name": "x", "qty": "lots"})
        assert response.status == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "Invalid request body"
        assert [issue["path"] for issue in data["issues"]] == [["qty"]]
        assert set(data["issues"][0]) == {"path", "message"}

    async def test_debug_adds_issue_codes(self) -> None:
        app = App(AppConfig(debug=True))
        app.post("/items", lambda ctx: ctx.body, body_schema=Item)
        async with TestClient(app) as client:
            response = await client.post("/items", json={"name": "x", "qty": "lots"})
        assert response.status == 400
        assert response.json()["issues"][0]["code"] == "int_parsing"

    async def test_malformed_json(self) -> None:
        app = App()
        app.post("/items", lambda ctx: ctx.body, body_schema=Item)
        async with TestClient(app) as client:
            response = await client.post(
                "/items", body=b"{oops", headers={"content-type": "application/json"}
            )
        assert response.status == 400
        data = response.json()
        assert data["error"] == "Invalid or missing JSON body"
        assert len(data["issues"]) == 1
        assert data["issues"][0]["path"] == []

    async def test_valid_body_reaches_handler(self) -> None:
        app = App()
        app.post("/items", lambda ctx: {"status": 201, "data": ctx.body}, body_schema=Item)
        async with TestClient(app) as client:
            response = await client.post("/items", json={"name": "x", "qty": "3"})
        assert response.status == 201
        assert response.json() == {"name": "x", "qty": 3}

    async def test_query_schema_failure(self) -> None:
        class Paging(BaseModel):
            page: int

        app = App()
        app.get("/list", lambda ctx: ctx.params, query_schema=Paging)
        async with TestClient(app) as client:
            response = await client.get("/list", query={"page": "x"})
        assert response.status == 400
        assert response.json()["error"] == "Invalid query parameters"

    async def test_response_schema_failure_is_500(self) -> None:
        app = App()
        app.get("/thing", lambda ctx: {"id": "nope"}, response_schema=Out)
        async with TestClient(app) as client:
            response = await client.get("/thing")
        assert response.status == 500
        data = response.json()
        assert data["error"] == "Invalid response data"
        assert data["issues"][0]["path"] == ["id"]


class TestMiddleware:
    async def test_short_circuit_skips_handler(self) -> None:
        hits = 0

        def handler(ctx: RequestContext) -> dict:
            nonlocal hits
            hits += 1
            return {"ok": True}

        app = App()
        app.use(BearerAuth("secret"))
        app.get("/private", handler)
        async with TestClient(app) as client:
            response = await client.get("/private")
        assert response.status == 401
        assert response.json() == {"message": "Unauthorized"}
        assert response.header("access-control-allow-origin") == "*"
        assert hits == 0

    async def test_group_order(self) -> None:
        calls: list[str] = []

        def tracer(name: str):
            async def mw(request, ctx, next):
                calls.append(name)
                return await next()

            return mw

        app = App()
        app.use(tracer("app"))
        api = app.group("/api").use(tracer("group"))
        api.get("/x", lambda ctx: calls.append("handler") or "ok", middlewares=[tracer("route")])
        async with TestClient(app) as client:
            response = await client.get("/api/x")
        assert response.status == 200
        assert calls == ["app", "group", "route", "handler"]

    async def test_middleware_sees_raw_values(self) -> None:
        class Paging(BaseModel):
            page: int

        seen: list[object] = []

        async def peek(request, ctx, next):
            seen.append(ctx.params)
            return await next()

        app = App()
        app.get("/list", lambda ctx: {"page": ctx.params.page}, query_schema=Paging, middlewares=[peek])
        async with TestClient(app) as client:
            response = await client.get("/list?page=2")
        assert seen == [{"page": "2"}]
        assert response.json() == {"page": 2}

    async def test_middleware_exception_is_500(self) -> None:
        async def broken(request, ctx, next):
            raise RuntimeError("middleware exploded")

        app = App()
        app.use(broken)
        app.get("/x", lambda ctx: "ok")
        async with TestClient(app) as client:
            response = await client.get("/x")
        assert response.status == 500
        assert response.json() == {"success": False, "error": "middleware exploded"}


class TestResponses:
    async def test_custom_status_and_headers(self) -> None:
        app = App()
        app.post(
            "/created",
            lambda ctx: {"status": 201, "headers": {"X-Id": "7"}, "body": {"ok": True}},
        )
        async with TestClient(app) as client:
            response = await client.post("/created")
        assert response.status == 201
        assert response.header("x-id") == "7"
        assert response.json() == {"ok": True}
        assert response.header("access-control-allow-origin") == "*"

    async def test_raw_response_bypasses_normalization(self) -> None:
        app = App()
        app.get("/raw", lambda ctx: Response("plain text", headers=(("Content-Type", "text/plain"),)))
        async with TestClient(app) as client:
            response = await client.get("/raw")
        assert response.text == "plain text"
        assert response.header("content-type") == "text/plain"
        assert response.header("access-control-allow-origin") is None

    async def test_undefined_scrubbed(self) -> None:
        app = App()
        app.get("/u", lambda ctx: {"a": UNDEFINED, "b": [1, UNDEFINED, 3]})
        async with TestClient(app) as client:
            response = await client.get("/u")
        assert response.json() == {"a": "", "b": [1, "", 3]}

    async def test_async_handler(self) -> None:
        app = App()

        @app.get("/async")
        async def handler(ctx):
            return Shaped(status=202, body={"queued": True})

        async with TestClient(app) as client:
            response = await client.get("/async")
        assert response.status == 202
        assert response.json() == {"queued": True}


class TestInternalErrors:
    async def test_handler_exception_message(self) -> None:
        def boom(ctx):
            raise ValueError("kaboom")

        app = App()
        app.get("/boom", boom)
        async with TestClient(app) as client:
            response = await client.get("/boom")
        assert response.status == 500
        assert response.json() == {"success": False, "error": "kaboom"}

    async def test_generic_fallback_message(self) -> None:
        def boom(ctx):
            raise RuntimeError

        app = App()
        app.get("/boom", boom)
        async with TestClient(app) as client:
            response = await client.get("/boom")
        assert response.json()["error"] == "Internal server error"

    async def test_debug_adds_exception_type(self) -> None:
        def boom(ctx):
            raise KeyError("k")

        app = App(AppConfig(debug=True))
        app.get("/boom", boom)
        async with TestClient(app) as client:
            response = await client.get("/boom")
        assert response.json()["exception"] == "KeyError"

    async def test_unencodable_header_is_500(self) -> None:
        app = App()
        app.get("/note", lambda ctx: Shaped(headers={"X-Note": "\u20ac"}, body={"ok": True}))
        async with TestClient(app) as client:
            response = await client.get("/note")
        assert response.status == 500
        assert response.json()["success"] is False
        assert "X-Note" in response.json()["error"]
        assert response.header("access-control-allow-origin") == "*"

    async def test_undefined_status_defaults_to_200(self) -> None:
        app = App()
        app.get("/soft", lambda ctx: {"status": UNDEFINED, "data": {"ok": True}})
        async with TestClient(app) as client:
            response = await client.get("/soft")
        assert response.status == 200
        assert response.json() == {"ok": True}


class TestMultipart:
    async def test_upload_validated(self) -> None:
        app = App()

        @app.post("/upload", body_schema=Upload)
        async def upload(ctx):
            content = await ctx.body.file.read()
            return {"name": ctx.body.name, "file": ctx.body.file.filename, "size": len(content)}

        async with TestClient(app) as client:
            response = await client.post(
                "/upload", data={"name": "x"}, files={"file": ("a.png", b"png-bytes", "image/png")}
            )
        assert response.status == 200
        assert response.json() == {"name": "x", "file": "a.png", "size": 9}

    async def test_stream_read_once(self) -> None:
        body, content_type = encode_multipart({"name": "x"}, {"file": ("a.png", b"data")})
        half = len(body) // 2
        chunks = [body[:half], body[half:]]
        calls = 0

        async def receive():
            nonlocal calls
            calls += 1
            index = calls - 1
            if index >= len(chunks):
                raise AssertionError("body stream read twice")
            return {"type": "http.request", "body": chunks[index], "more_body": index + 1 < len(chunks)}

        async def peek(request, ctx, next):
            form = await request.form()
            assert form["name"] == "x"
            return await next()

        app = App()

        @app.post("/upload", body_schema=Upload, middlewares=[peek])
        async def upload(ctx):
            again = await ctx.request.form()
            return {"same": again is ctx.form_data, "file": ctx.body.file.filename}

        scope = {
            "type": "http",
            "method": "POST",
            "path": "/upload",
            "query_string": b"",
            "headers": [(b"content-type", content_type.encode())],
        }
        response = await app.dispatch(Request.from_asgi(scope, receive))
        assert response.status == 200
        assert response.json() == {"same": True, "file": "a.png"}
        assert calls == 2


class TestPayloadLimit:
    async def test_oversized_body_is_413(self) -> None:
        app = App(AppConfig(max_content_length=8))
        app.post("/items", lambda ctx: ctx.body, body_schema=Item)
        async with TestClient(app) as client:
            response = await client.post("/items", json={"name": "long enough", "qty": 1})
        assert response.status == 413
        assert response.json()["success"] is False


class TestLifespan:
    async def test_startup_and_shutdown(self) -> None:
        app = App()
        messages = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent: list[dict] = []

        async def receive():
            return next(messages)

        async def send(message):
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)
        assert [m["type"] for m in sent] == ["lifespan.startup.complete", "lifespan.shutdown.complete"]
        assert app.router.compiled
