"""
=============================================================================
FILESERVER - Minimal HTTP File Server
=============================================================================

Serves, writes and deletes files under one directory over HTTP/1.1, with
optional home/stats/increment endpoints and a process-wide request counter.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    fileserver/
    ├── __init__.py          # Package exports
    ├── __main__.py          # CLI entry point (python -m fileserver)
    ├── server.py            # HTTPServer: serve facility + dispatcher
    ├── dispatcher.py        # RequestDispatcher: method/path routing
    ├── counter.py           # RequestCounter
    ├── errors.py            # HTTPError and subclasses
    ├── config.py            # ServerConfig
    ├── core/                # Sockets, connections, thread pool
    ├── http/                # Request parsing, responses, status, MIME
    ├── middleware/          # Pipeline and access logging
    └── handlers/            # Files, mutations, stats, path resolution

=============================================================================
QUICK START
=============================================================================

    from fileserver import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(web_root="./site", port=3000))
    server.run()

Or, without sockets:

    from fileserver import RequestDispatcher, ServerConfig
    from fileserver.http import HTTPRequest

    dispatcher = RequestDispatcher(ServerConfig(web_root="./site"))
    response = dispatcher.handle(HTTPRequest(method="GET", path="/"))

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .counter import RequestCounter
from .dispatcher import RequestDispatcher
from .server import HTTPServer

__all__ = [
    "HTTPServer",
    "RequestDispatcher",
    "RequestCounter",
    "ServerConfig",
    "__version__",
]
