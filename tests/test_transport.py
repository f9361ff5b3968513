"""Tests for the aiohttp transport against a local test server."""

import json

import aiohttp
import pytest
from aiohttp import test_utils, web
from kwatta import AiohttpTransport, HttpResponse, Kwatta, RequestError, RequestOptions


async def echo(request: web.Request) -> web.Response:
    body = await request.text()
    return web.json_response(
        {
            "method": request.method,
            "path": request.path,
            "headers": dict(request.headers),
            "body": body,
        }
    )


async def missing(request: web.Request) -> web.Response:
    return web.json_response({"error": "not found"}, status=404)


async def empty(request: web.Request) -> web.Response:
    return web.Response(status=204)


def make_app() -> web.Application:
    app = web.Application()
    app.router.add_route("*", "/echo", echo)
    app.router.add_get("/missing", missing)
    app.router.add_route("*", "/empty", empty)
    return app


class TestHttpResponse:
    """Tests for HttpResponse."""

    def test_ok_range(self):
        """Test the 2xx success flag."""
        assert HttpResponse(status_code=200, content=b"").ok
        assert HttpResponse(status_code=299, content=b"").ok
        assert not HttpResponse(status_code=304, content=b"").ok
        assert not HttpResponse(status_code=404, content=b"").ok

    def test_json(self):
        """Test JSON decoding."""
        assert HttpResponse(status_code=200, content=b'{"a": [1]}').json() == {"a": [1]}
        assert HttpResponse(status_code=200, content=b"  ").json() is None

    def test_invalid_json(self):
        """Test that malformed bodies raise."""
        with pytest.raises(json.JSONDecodeError):
            HttpResponse(status_code=200, content=b"{").json()


class TestAiohttpTransport:
    """Tests for AiohttpTransport."""

    @pytest.mark.asyncio
    async def test_sends_method_headers_and_body(self):
        """Test a round trip through a real server."""
        async with (
            test_utils.TestServer(make_app()) as server,
            AiohttpTransport(user_agent="kwatta-tests") as transport,
        ):
            options = RequestOptions(
                method="POST",
                headers={"Content-Type": "application/json", "X-Test": "1"},
                body='{"name": "widget"}',
            )
            response = await transport(str(server.make_url("/echo")), options)

        assert response.ok
        assert response.content_type.startswith("application/json")
        data = response.json()
        assert data["method"] == "POST"
        assert data["headers"]["X-Test"] == "1"
        assert data["headers"]["User-Agent"] == "kwatta-tests"
        assert json.loads(data["body"]) == {"name": "widget"}

    @pytest.mark.asyncio
    async def test_error_status_returned(self):
        """Test that the transport reports statuses without raising."""
        async with test_utils.TestServer(make_app()) as server, AiohttpTransport() as transport:
            response = await transport(str(server.make_url("/missing")), RequestOptions(method="GET"))
        assert response.status_code == 404
        assert not response.ok

    @pytest.mark.asyncio
    async def test_connection_error_propagates(self):
        """Test that network failures raise aiohttp errors."""
        async with test_utils.TestServer(make_app()) as server:
            url = str(server.make_url("/echo"))

        async with AiohttpTransport() as transport:
            with pytest.raises(aiohttp.ClientConnectionError):
                await transport(url, RequestOptions(method="GET"))

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        """Test closing without and after use."""
        transport = AiohttpTransport()
        await transport.close()
        await transport.close()


class TestClientOverAiohttp:
    """End-to-end tests of Kwatta with the default transport."""

    @pytest.mark.asyncio
    async def test_get_post_and_auth(self):
        """Test the client against a live server."""
        async with test_utils.TestServer(make_app()) as server:
            base_url = f"http://{server.host}:{server.port}"
            async with Kwatta(base_url, rate_limit_delay=0) as client:
                client.set_auth_token("abc")

                got = await client.get("/echo")
                assert got["method"] == "GET"
                assert got["headers"]["Authorization"] == "Bearer abc"

                posted = await client.post("/echo", {"a": 1})
                assert json.loads(posted["body"]) == {"a": 1}
                assert posted["headers"]["Content-Type"] == "application/json"

                assert await client.delete("/empty") is None

    @pytest.mark.asyncio
    async def test_multipart_upload(self):
        """Test that aiohttp sets the multipart boundary header."""
        async with test_utils.TestServer(make_app()) as server:
            base_url = f"http://{server.host}:{server.port}"
            async with Kwatta(base_url, rate_limit_delay=0) as client:
                form = aiohttp.FormData()
                form.add_field("file", b"hello", filename="hello.txt")

                echoed = await client.post("/echo", form)

        assert echoed["headers"]["Content-Type"].startswith("multipart/form-data; boundary=")

    @pytest.mark.asyncio
    async def test_404(self):
        """Test that a live 404 raises RequestError."""
        async with test_utils.TestServer(make_app()) as server:
            base_url = f"http://{server.host}:{server.port}"
            async with Kwatta(base_url, rate_limit_delay=0) as client:
                with pytest.raises(RequestError) as exc_info:
                    await client.get("/missing")
        assert exc_info.value.status == 404
