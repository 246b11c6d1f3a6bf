"""
End-to-end tests over real sockets.
"""

import http.client
import json
import socket
from typing import Dict, Tuple

import pytest

from fileserver import HTTPServer
from fileserver.server import serve_in_thread


def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes, read until the server closes the connection."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as sock:
        sock.sendall(data)
        chunks = []
        while True:
            chunk = sock.recv(65536)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


def request(
    port: int, method: str, path: str, body: bytes = b""
) -> Tuple[int, Dict[str, str], bytes]:
    head = (
        f"{method} {path} HTTP/1.1\r\n"
        f"Host: 127.0.0.1:{port}\r\n"
        f"Content-Length: {len(body)}\r\n"
        f"Connection: close\r\n"
        f"\r\n"
    ).encode()
    raw = send_raw(port, head + body)

    header_block, _, payload = raw.partition(b"\r\n\r\n")
    lines = header_block.decode("latin-1").split("\r\n")
    status = int(lines[0].split(" ")[1])
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip()] = value.strip()
    return status, headers, payload


@pytest.fixture
def port(live_server) -> int:
    return live_server.address[1]


class TestFileRoundTrip:
    """PUT, GET, HEAD and DELETE through the whole stack."""

    def test_put_get_head_delete(self, port, web_root):
        status, _, body = request(port, "PUT", "/notes/a.txt", b"hello world")
        assert status == 201
        assert body == b"HTTP/1.1 201 Created\n\nCreated"
        assert (web_root / "notes" / "a.txt").read_bytes() == b"hello world"

        status, headers, body = request(port, "GET", "/notes/a.txt")
        assert status == 200
        assert body == b"hello world"
        assert headers["Content-Type"] == "text/plain; charset=utf-8"
        assert headers["Content-Length"] == "11"

        status, headers, body = request(port, "HEAD", "/notes/a.txt")
        assert status == 200
        assert headers["Content-Length"] == "11"
        assert body == b""

        status, headers, body = request(port, "DELETE", "/notes/a.txt")
        assert status == 204
        assert body == b""
        assert "Content-Length" not in headers

        status, _, _ = request(port, "GET", "/notes/a.txt")
        assert status == 404

    def test_directory_index(self, port, web_root):
        (web_root / "docs").mkdir()
        (web_root / "docs" / "index.html").write_text("<h1>Hi</h1>")

        status, headers, body = request(port, "GET", "/docs")

        assert status == 200
        assert body == b"<h1>Hi</h1>"
        assert headers["Content-Type"] == "text/html; charset=utf-8"
        assert headers["Content-Length"] == "11"

    def test_traversal(self, port):
        status, _, body = request(port, "GET", "/../etc/passwd")

        assert status == 403
        assert body == b"HTTP/1.1 403 Forbidden\n\nForbidden"

    def test_dotted_name_is_served(self, port, web_root):
        (web_root / "notes..txt").write_text("kept")

        status, _, body = request(port, "GET", "/notes..txt")

        assert status == 200
        assert body == b"kept"

    def test_double_slash_put_stays_in_its_directory(self, port, web_root):
        """"//notes/a.txt" writes notes/a.txt, not a.txt at the root."""
        (web_root / "notes").mkdir()

        status, _, _ = request(port, "PUT", "//notes/a.txt", b"nested")

        assert status == 201
        assert (web_root / "notes" / "a.txt").read_bytes() == b"nested"
        assert not (web_root / "a.txt").exists()

    def test_unsupported_method(self, port):
        status, headers, _ = request(port, "PATCH", "/a.txt")

        assert status == 405
        assert headers["Allow"] == "GET, HEAD, POST, PUT, DELETE"

    def test_access_log_header(self, port):
        _, headers, _ = request(port, "GET", "/missing")

        assert len(headers["X-Request-ID"]) == 8
        assert headers["Server"] == "fileserver/1.0"
        assert headers["Connection"] == "close"


class TestStatsEndpoints:
    """Home, stats and increment with the live counter."""

    def test_home(self, port):
        status, headers, body = request(port, "GET", "/")

        assert status == 200
        assert body == b"<h1>fileserver</h1>"

    def test_counts_requests_but_not_malformed_ones(self, port, live_server):
        raw = send_raw(port, b"NOT HTTP AT ALL\r\n\r\n")
        assert raw.startswith(b"HTTP/1.1 400 Bad Request\r\n")
        assert raw.endswith(b"HTTP/1.1 400 Bad Request\n\nBad Request")

        request(port, "GET", "/missing")
        request(port, "PATCH", "/missing")
        status, _, body = request(port, "GET", "/stats")

        assert status == 200
        payload = json.loads(body)
        assert payload["totalRequests"] == 3
        assert float(payload["uptimeSeconds"]) >= 0
        assert live_server.counter.count == 3

    def test_increment(self, port):
        request(port, "GET", "/")

        status, _, body = request(port, "POST", "/increment")

        assert status == 200
        assert json.loads(body) == {"success": True, "count": 2}


class TestKeepAlive:
    """Several requests on one connection."""

    def test_two_requests_one_connection(self, port):
        conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
        try:
            conn.request("PUT", "/k.txt", body=b"abc")
            first = conn.getresponse()
            first.read()
            assert first.status == 201
            assert first.getheader("Connection") == "keep-alive"

            conn.request("GET", "/k.txt")
            second = conn.getresponse()
            assert second.status == 200
            assert second.read() == b"abc"
        finally:
            conn.close()


class TestLifecycle:
    """Start and stop without signals."""

    def test_shutdown_stops_run(self, config, free_port):
        config.port = free_port
        server = HTTPServer(config)
        thread = serve_in_thread(server)
        assert server.address == ("127.0.0.1", free_port)

        server.shutdown()
        thread.join(timeout=10.0)

        assert not thread.is_alive()
        assert not server.wait_until_ready(timeout=0)
        with pytest.raises(OSError):
            socket.create_connection(("127.0.0.1", free_port), timeout=1).close()
