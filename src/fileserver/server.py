"""
=============================================================================
FILE SERVER
=============================================================================

Ties the serve facility to the dispatcher.

    ┌──────────────┐   Connection   ┌────────────┐
    │ SocketServer │ ─────────────► │ ThreadPool │
    └──────────────┘                └─────┬──────┘
                                          │ worker thread
                                          ▼
                            read ─► parse ─► middleware ─► RequestDispatcher
                                                                  │
                            send ◄─ to_bytes ◄────────────────────┘

=============================================================================
FAILURES OUTSIDE THE DISPATCHER
=============================================================================

The dispatcher never raises, but the bytes around it can be bad:

    request cannot be parsed        → 400 / 413 / 505, connection closed
    first request never arrives     → 408, connection closed
    every worker busy, queue full   → 503, connection closed

These answers use the same plain-text error body as the dispatcher. They
do not reach the dispatcher, so they are not counted.

=============================================================================
"""

import logging
import threading
from typing import Callable, Optional

from .config import ServerConfig
from .core import Connection, SocketServer, ThreadPool
from .counter import RequestCounter
from .dispatcher import RequestDispatcher
from .http.request import HTTPParseError, HTTPRequest, RequestParser
from .http.response import HTTPResponse, error_response
from .http.status_codes import HTTPStatus
from .middleware import LoggingMiddleware, Middleware, MiddlewarePipeline


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Threaded HTTP server around a RequestDispatcher.

    Usage:
        server = HTTPServer(ServerConfig(web_root="./site", port=3000))
        server.run()            # blocks until SIGINT / SIGTERM / shutdown()
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        counter: Optional[RequestCounter] = None,
    ):
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)

        self.dispatcher = RequestDispatcher(self.config, counter)
        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))

        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    @property
    def counter(self) -> RequestCounter:
        return self.dispatcher.counter

    @property
    def address(self):
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    def use(self, middleware: Middleware) -> "HTTPServer":
        """Add middleware after the access logger. Call before run()."""
        self._middleware.add(middleware)
        return self

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """Start serving (blocking). ``host``/``port`` override the config."""
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        self._handler = self._middleware.wrap(self.dispatcher.handle)
        self._running = True
        self._thread_pool.start()

        logger.info(
            f"Serving {self.config.web_root} "
            f"(files={'on' if self.config.enable_files else 'off'}, "
            f"stats={'on' if self.config.enable_stats else 'off'}, "
            f"workers={self.config.min_workers}-{self.config.max_workers})"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Stop accepting connections. run() returns once workers finish."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("fileserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=self.config.keep_alive_timeout + 1)
        logger.info(f"Server stopped after {self.counter.count} requests")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        submitted = self._thread_pool.submit(
            self._process_connection,
            args=(conn,),
            block=False,
        )
        if not submitted:
            logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE)
            conn.close()

    def _process_connection(self, conn: Connection):
        """Keep-alive loop for one connection (worker thread)."""
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                    if raw_request is None:
                        break

                    request = self._parser.parse(raw_request, conn.address)
                except HTTPParseError as e:
                    logger.info(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
                    self._send_error(conn, e.status_code)
                    break
                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT)
                    break
                except OSError as e:
                    logger.debug(f"[{conn.id}] Read failed: {e}")
                    break

                conn.state = conn.state.PROCESSING

                try:
                    response = self._handler(request)
                except Exception as e:
                    logger.exception(f"[{conn.id}] Handler error: {e}")
                    response = error_response(HTTPStatus.INTERNAL_SERVER_ERROR)

                keep_alive = request.is_keep_alive and self.config.keep_alive
                if keep_alive:
                    response.headers.setdefault("Connection", "keep-alive")
                    response.headers.setdefault(
                        "Keep-Alive", f"timeout={int(self.config.keep_alive_timeout)}"
                    )
                else:
                    response.headers["Connection"] = "close"

                if not conn.send_response(response.to_bytes(self.config.server_name)):
                    break
                if not keep_alive or response.headers.get("Connection") == "close":
                    break

                conn.set_keep_alive()

    def _send_error(self, conn: Connection, status: int):
        response = error_response(status).set_header("Connection", "close")
        conn.send_response(response.to_bytes(self.config.server_name))


def serve_in_thread(server: HTTPServer, timeout: float = 5.0) -> threading.Thread:
    """
    Run ``server`` on a daemon thread and wait until it is listening.

    Raises:
        RuntimeError: If the server is not listening within ``timeout``.
    """
    thread = threading.Thread(target=server.run, name="fileserver-main", daemon=True)
    thread.start()
    if not server.wait_until_ready(timeout):
        server.shutdown()
        raise RuntimeError("Server did not start in time")
    return thread
