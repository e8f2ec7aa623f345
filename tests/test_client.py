import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from linkstatus.client import HTTPLinkClient, LinkCheckError, is_status_available


def _make_server(status, drop_connection=False):
    methods = []

    class Handler(BaseHTTPRequestHandler):
        def _handle(self):
            methods.append(self.command)
            if drop_connection:
                self.close_connection = True
                return
            self.send_response(status)
            self.send_header("Content-Length", "12")
            self.end_headers()

        do_HEAD = _handle
        do_GET = _handle

        def log_message(self, format, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server, methods


@pytest.fixture
def serve():
    servers = []

    def start(status=200, drop_connection=False):
        server, methods = _make_server(status, drop_connection)
        servers.append(server)
        host, port = server.server_address[:2]
        return f"http://{host}:{port}", methods

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, expected",
    [(200, True), (301, True), (404, False), (500, False)],
)
async def test_status_codes(serve, status, expected):
    url, methods = serve(status)
    client = HTTPLinkClient(timeout=2.0, allow_redirects=False)
    assert await client.is_link_available(url) is expected
    assert methods == ["HEAD"]


@pytest.mark.asyncio
async def test_network_error_raises(serve):
    url, methods = serve(drop_connection=True)
    client = HTTPLinkClient(timeout=2.0, allow_redirects=False)
    with pytest.raises(LinkCheckError, match="network error"):
        await client.is_link_available(url)
    assert methods == ["HEAD"]


@pytest.mark.asyncio
async def test_link_without_scheme_raises():
    client = HTTPLinkClient()
    with pytest.raises(LinkCheckError, match="aaa.com"):
        await client.is_link_available("aaa.com")


@pytest.mark.parametrize(
    "code, expected",
    [(199, False), (200, True), (299, True), (300, True), (399, True), (400, False), (503, False)],
)
def test_is_status_available(code, expected):
    assert is_status_available(code) is expected


def test_defaults():
    client = HTTPLinkClient()
    assert client.timeout == 2.0
    assert client.allow_redirects is True