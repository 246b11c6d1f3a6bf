"""
=============================================================================
FILE RESPONDER (GET / HEAD)
=============================================================================

Serves files from the web root.

=============================================================================
GET FLOW
=============================================================================

    GET /docs
      │
      ├── "" or "/"?            → use "/index.html"
      ├── ".." segment?         → 403 Forbidden
      ├── resolve under web_root
      ├── missing?              → 404 Not Found
      ├── directory?            → GET "/docs/index.html" (same flow again)
      └── file                  → 200, Content-Type, Content-Length, bytes

=============================================================================
HEAD FLOW
=============================================================================

Same checks and the same headers as GET, with an empty body. The one
difference: a directory is always 404 for HEAD, even when it holds an
index.html. GET falls back to the index, HEAD does not.

    GET  /docs   → 200 (docs/index.html)
    HEAD /docs   → 404

=============================================================================
FAILURES
=============================================================================

Any OSError while checking, stat-ing or reading becomes a plain 500. The
exception is logged and never leaves this module.

=============================================================================
"""

import logging
from pathlib import Path

from ..errors import HTTPError, NotFound
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, error_response
from ..http.status_codes import HTTPStatus
from ..http.mime_types import get_content_type
from .paths import check_parent_segment, resolve_path


logger = logging.getLogger(__name__)


class FileResponder:
    """
    Handler for GET and HEAD requests on files under the web root.

    Usage:
        files = FileResponder("./web_root")
        response = files.handle_get("/css/site.css")
    """

    def __init__(self, web_root: str, index_file: str = "index.html"):
        """
        Args:
            web_root: Directory files are served from.
            index_file: File served for "/" and for directories on GET.
        """
        self.web_root = web_root
        self.index_file = index_file

    # Request-level adapters used by the dispatcher

    def get(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle_get(request.path)

    def head(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle_head(request.path)

    def handle_get(self, path: str) -> HTTPResponse:
        """Serve a file, falling back to a directory's index file."""
        try:
            return self._get(path)
        except HTTPError as e:
            return e.to_response()
        except OSError as e:
            logger.error(f"Error serving {path!r}: {e}")
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR)

    def handle_head(self, path: str) -> HTTPResponse:
        """Headers of a file without its body. Directories are 404."""
        try:
            return self._head(path)
        except HTTPError as e:
            return e.to_response()
        except OSError as e:
            logger.error(f"Error inspecting {path!r}: {e}")
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR)

    def _get(self, path: str) -> HTTPResponse:
        path = self._default_path(path)
        check_parent_segment(path)
        target = Path(resolve_path(path, self.web_root))

        if not target.exists():
            raise NotFound()

        if target.is_dir():
            return self._get(f"{path.rstrip('/')}/{self.index_file}")

        content = target.read_bytes()
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type(get_content_type(path))
            .header("Content-Length", str(len(content)))
            .body(content)
            .build())

    def _head(self, path: str) -> HTTPResponse:
        path = self._default_path(path)
        check_parent_segment(path)
        target = Path(resolve_path(path, self.web_root))

        if not target.exists() or target.is_dir():
            raise NotFound()

        size = target.stat().st_size
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type(get_content_type(path))
            .header("Content-Length", str(size))
            .build())

    def _default_path(self, path: str) -> str:
        if path in ("", "/"):
            return f"/{self.index_file}"
        return path
