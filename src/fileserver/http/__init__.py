"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

    request.py       Raw bytes → HTTPRequest (RequestParser)
    response.py      HTTPResponse, ResponseBuilder, error_response
    status_codes.py  HTTPStatus enum with reason phrases
    mime_types.py    Extension → Content-Type

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    error_response,
    no_content,
    format_http_date,
)
from .status_codes import HTTPStatus, reason_phrase
from .mime_types import get_mime_type, get_content_type

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "error_response",
    "no_content",
    "format_http_date",

    # Status codes
    "HTTPStatus",
    "reason_phrase",

    # MIME types
    "get_mime_type",
    "get_content_type",
]
