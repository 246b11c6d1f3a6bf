"""
pytest configuration and fixtures.
"""

import socket
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import HTTPServer, RequestCounter, RequestDispatcher, ServerConfig
from fileserver.http import HTTPRequest
from fileserver.server import serve_in_thread


@pytest.fixture
def web_root(tmp_path: Path) -> Path:
    """Empty web root directory."""
    root = tmp_path / "web_root"
    root.mkdir()
    return root


@pytest.fixture
def config(web_root: Path) -> ServerConfig:
    """Test configuration: files on, stats off, OS-assigned port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        keep_alive_timeout=1.0,
        web_root=str(web_root),
        log_level="WARNING",
    )


@pytest.fixture
def counter() -> RequestCounter:
    return RequestCounter()


@pytest.fixture
def dispatcher(config: ServerConfig, counter: RequestCounter) -> RequestDispatcher:
    return RequestDispatcher(config, counter)


@pytest.fixture
def make_request() -> Callable[..., HTTPRequest]:
    """Factory for HTTPRequest objects without going through the parser."""
    def _make(method: str, path: str, body: bytes = b"", **headers: str) -> HTTPRequest:
        return HTTPRequest(
            method=method,
            path=path,
            headers={k.lower().replace("_", "-"): v for k, v in headers.items()},
            body=body,
            client_address=("127.0.0.1", 54321),
        )
    return _make


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /docs/guide.html?lang=en&page=2 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_put_request() -> bytes:
    """Sample HTTP PUT request with a text body."""
    body = b"remember the milk"
    return (
        b"PUT /notes/a.txt HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: text/plain\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"Connection: close\r\n"
        b"\r\n"
    ) + body


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def live_server(config: ServerConfig, free_port: int) -> Generator[HTTPServer, None, None]:
    """A server listening on a free port, stopped after the test."""
    config.port = free_port
    config.enable_stats = True
    server = HTTPServer(config)
    thread = serve_in_thread(server)

    yield server

    server.shutdown()
    thread.join(timeout=10.0)
