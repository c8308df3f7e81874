"""
Integration tests: real sockets through FullAsyncServer.
"""

import asyncio
import copy
import logging

import pytest

from siphon.app import build_handler
from siphon.config import JsonConfigParser, base_config
from siphon.handle import LoggingHandler, SiphonHandler, TemplateHandler, NotFoundHandler
from siphon.server import FullAsyncServer
from siphon.web import HTTPRequest

from .helpers import CountingHandler, raw_request


class Exploding:
    async def handle(self, request, response):
        raise RuntimeError("boom")


async def exchange(handler, payload: bytes) -> bytes:
    server = FullAsyncServer(handler, timeout=2)
    listener = await server.start("127.0.0.1", 0)
    port = listener.sockets[0].getsockname()[1]
    try:
        reader, writer = await asyncio.open_connection("127.0.0.1", port)
        writer.write(payload)
        await writer.drain()
        data = await asyncio.wait_for(reader.read(), 5)
        writer.close()
        return data
    finally:
        listener.close()
        await listener.wait_closed()


async def test_serves_handler():
    data = await exchange(CountingHandler(body=b"hello"), raw_request("/"))
    assert data.startswith(b"HTTP/1.1 200 OK\r\n")
    assert b"Content-Length: 5\r\n" in data
    assert data.endswith(b"\r\n\r\nhello")


async def test_head_sends_headers_only():
    data = await exchange(CountingHandler(body=b"hello"), raw_request("/", "HEAD"))
    assert data.startswith(b"HTTP/1.1 200 OK\r\n")
    assert b"Content-Length: 5\r\n" in data
    assert data.endswith(b"\r\n\r\n")


async def test_reads_body():
    seen = []

    class Echo:
        async def handle(self, request, response):
            seen.append(request.body)
            response.write(request.body)

    data = await exchange(Echo(), raw_request("/", "POST", {"Content-Length": "3"}, b"abc"))
    assert seen == [b"abc"]
    assert data.endswith(b"abc")


async def test_handler_error_is_500(caplog):
    data = await exchange(Exploding(), raw_request("/"))
    assert data.startswith(b"HTTP/1.1 500 Internal Server Error\r\n")
    assert "Handler raise an error" in caplog.text
    assert "RuntimeError: boom" in caplog.text


async def test_malformed_request_is_400(caplog):
    data = await exchange(CountingHandler(), b"nonsense\r\n\r\n")
    assert data.startswith(b"HTTP/1.1 400 Bad Request\r\n")
    assert "Request Unpack Error" in caplog.text


async def test_chain_over_socket(caplog):
    caplog.set_level(logging.INFO, logger="siphon")
    handler = LoggingHandler(SiphonHandler(NotFoundHandler(), "/only"), name="edge")
    data = await exchange(handler, raw_request("/elsewhere", headers={"X-Forwarded-For": "198.51.100.7"}))
    assert data.startswith(b"HTTP/1.1 302 Found\r\n")
    assert b"Location: /only\r\n" in data
    assert "edge> @198.51.100.7 -> /elsewhere (302)" in caplog.text


async def test_dispatch_keeps_first_status():
    class Twice:
        async def handle(self, request, response):
            response.write(b"body")
            response.write_status(500)

    server = FullAsyncServer(Twice())
    res = await server.dispatch(HTTPRequest(raw_request("/")))
    assert res.code == 200


@pytest.fixture
def site_conf(template_root) -> JsonConfigParser:
    conf = JsonConfigParser(copy.deepcopy(base_config))
    conf.set("template", "template_path", str(template_root))
    conf.set("site", "template", "page.html")
    conf.set("site", "data", {"title": "Home"})
    conf.set("site", "name", "home")
    return conf


def test_build_handler_plain(site_conf):
    handler = build_handler(site_conf)
    assert isinstance(handler, LoggingHandler)
    assert handler.name == "home"
    assert isinstance(handler.handler, TemplateHandler)
    assert handler.handler.data == {"title": "Home"}
    assert handler.handler.debug is False


def test_build_handler_siphon(site_conf):
    site_conf.set("site", "siphon_target", "/index")
    handler = build_handler(site_conf)
    assert isinstance(handler.handler, SiphonHandler)
    assert handler.handler.target == "/index"
    assert isinstance(handler.handler.handler, TemplateHandler)


async def test_built_site(site_conf, caplog):
    caplog.set_level(logging.INFO, logger="siphon")
    site_conf.set("site", "siphon_target", "/index")
    handler = build_handler(site_conf)
    redirected = await exchange(handler, raw_request("/"))
    assert redirected.startswith(b"HTTP/1.1 302 Found\r\n")
    page = await exchange(handler, raw_request("/index"))
    assert page.startswith(b"HTTP/1.1 200 OK\r\n")
    assert page.endswith(b"<p>Home</p>")
    assert "home> @ -> /index (200)" in caplog.text
