"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Response objects returned by every handler, plus the uniform error/status
formatter shared by all of them.

=============================================================================
RESPONSE FORMAT ON THE WIRE
=============================================================================

    HTTP/1.1 200 OK\r\n                         ← status line
    Content-Type: text/html; charset=utf-8\r\n
    Content-Length: 11\r\n                      ← added if missing
    Date: Mon, 19 Oct 2026 10:00:00 GMT\r\n     ← added if missing
    Server: fileserver/1.0\r\n                  ← added if missing
    \r\n
    <h1>Hi</h1>                                 ← body bytes

A HEAD response sets Content-Length to the size of the file it describes
while carrying an empty body. The serializer never overwrites a
Content-Length that a handler already set.

=============================================================================
STATUS MESSAGES
=============================================================================

Every non-200/204 outcome (and the 201 "Created" success) goes through
``error_response``, which produces one plain-text shape:

    status=404, message="Not Found"

    Content-Type: text/plain

    HTTP/1.1 404 Not Found
    <blank line>
    Not Found

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
import json

from .status_codes import HTTPStatus, reason_phrase


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

    Plain data container. Handlers usually create one through
    ``ResponseBuilder`` or ``error_response``.
    """

    status: int = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """E.g. "HTTP/1.1 200 OK"."""
        return f"{self.version} {int(self.status)} {reason_phrase(self.status)}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self.headers[name] = value
        return self

    def to_bytes(self, server_name: str = "fileserver/1.0") -> bytes:
        """
        Serialize the response for ``socket.sendall()``.

        Content-Length, Date and Server are filled in only when the handler
        did not set them. A 204 never gets a Content-Length (RFC 7230 3.3.2).
        """
        response_headers = dict(self.headers)

        if "Content-Length" not in response_headers and self.status != HTTPStatus.NO_CONTENT:
            response_headers["Content-Length"] = str(len(self.body))
        if "Date" not in response_headers:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))
        if "Server" not in response_headers:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("Content-Type", "image/png")
            .body(data)
            .build())

    Each method except ``build()`` returns the builder itself.
    """

    def __init__(self):
        self._status: int = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: int) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the raw body. Strings are encoded as UTF-8."""
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def html(self, html: str) -> "ResponseBuilder":
        self._body = html.encode("utf-8")
        self._headers["Content-Type"] = "text/html; charset=utf-8"
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """
        Set a JSON body.

        ensure_ascii=False keeps non-ASCII characters readable instead of
        escaping them to \\uXXXX sequences.
        """
        self._body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    def close_connection(self) -> "ResponseBuilder":
        """Ask the client to close the connection after this response."""
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Example: Mon, 19 Oct 2026 12:00:00 GMT. Always GMT, never local time.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# STATUS RESPONSES
# =============================================================================

def error_response(status: int, message: Optional[str] = None) -> HTTPResponse:
    """
    Build the uniform status + message response.

    Body is ``"HTTP/1.1 <status> <message>\\n\\n<message>"`` served as
    ``text/plain``. Used for every error and for 201 "Created".

    Args:
        status: Status code to send.
        message: Text for both the echoed status line and the body.
                 Defaults to the standard reason phrase.
    """
    if message is None:
        message = reason_phrase(status)
    return (ResponseBuilder()
        .status(status)
        .text(f"HTTP/1.1 {int(status)} {message}\n\n{message}", "text/plain")
        .build())


def no_content() -> HTTPResponse:
    """204 No Content: no body, no Content-Type."""
    return ResponseBuilder().status(HTTPStatus.NO_CONTENT).build()
