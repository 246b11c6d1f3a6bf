"""
Classified request failures.

Each class carries the status code and message it maps to and can turn
itself into the uniform plain-text response:

    NotFound           404  target file/directory absent
    Forbidden          403  ".." found in the request path
    MethodNotAllowed   405  verb not served by the active routes
    InternalError      500  anything unexpected

Handlers normally return error responses directly; raising one of these is
for code paths that want to bail out from deep inside a call chain. The
dispatcher converts them at its boundary.
"""

from typing import Optional

from .http.response import HTTPResponse, error_response
from .http.status_codes import HTTPStatus


class HTTPError(Exception):
    """Base class for failures that map to a specific HTTP status."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: Optional[str] = None):
        self.message = message or HTTPStatus(self.status_code).phrase
        super().__init__(self.message)

    def to_response(self) -> HTTPResponse:
        return error_response(self.status_code, self.message)


class NotFound(HTTPError):
    status_code = HTTPStatus.NOT_FOUND


class Forbidden(HTTPError):
    status_code = HTTPStatus.FORBIDDEN


class MethodNotAllowed(HTTPError):
    status_code = HTTPStatus.METHOD_NOT_ALLOWED


class InternalError(HTTPError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
