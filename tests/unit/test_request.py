"""
Unit tests for HTTP request parsing.
"""

import pytest

from fileserver.http.request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    parse_request,
)


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a simple GET request."""
        parser = RequestParser()
        request = parser.parse(sample_get_request, ("127.0.0.1", 12345))

        assert request.method == "GET"
        assert request.path == "/docs/guide.html"
        assert request.version == "HTTP/1.1"
        assert request.client_address == ("127.0.0.1", 12345)

    def test_parse_headers(self, sample_get_request: bytes):
        """Test that headers are parsed correctly."""
        request = parse_request(sample_get_request)

        assert request.host == "localhost:8080"
        assert request.user_agent == "pytest"
        assert request.headers["accept"] == "text/html"
        assert request.is_keep_alive is True

    def test_parse_query_params(self, sample_get_request: bytes):
        """Query string is split off the path and parsed."""
        request = parse_request(sample_get_request)

        assert request.get_query("lang") == "en"
        assert request.get_query("page") == "2"
        assert request.get_query("missing") is None
        assert request.get_query("missing", "default") == "default"

    def test_parse_put_with_body(self, sample_put_request: bytes):
        """Test parsing PUT request with a body."""
        request = parse_request(sample_put_request)

        assert request.method == "PUT"
        assert request.path == "/notes/a.txt"
        assert request.body == b"remember the milk"
        assert request.is_keep_alive is False

    def test_percent_decoded_path(self):
        """Paths are percent-decoded before any handler sees them."""
        raw = b"GET /my%20notes/a%2Eb.txt HTTP/1.1\r\nHost: test\r\n\r\n"
        request = parse_request(raw)

        assert request.path == "/my notes/a.b.txt"

    def test_encoded_dots_reach_the_handler_decoded(self):
        """The parser does not reject "..", the file handlers do."""
        raw = b"GET /%2e%2e/etc/passwd HTTP/1.1\r\nHost: test\r\n\r\n"
        request = parse_request(raw)

        assert request.path == "/../etc/passwd"

    def test_double_slash_path_is_not_a_host(self):
        """"//a/b" keeps its first segment instead of reading it as a host."""
        raw = b"GET //notes/a.txt?v=1 HTTP/1.1\r\nHost: test\r\n\r\n"
        request = parse_request(raw)

        assert request.path == "//notes/a.txt"
        assert request.get_query("v") == "1"

    def test_fragment_is_dropped(self):
        raw = b"GET /a.txt#top HTTP/1.1\r\nHost: test\r\n\r\n"
        assert parse_request(raw).path == "/a.txt"

    def test_absolute_form_target(self):
        """A full URL target is reduced to its path and query."""
        raw = b"GET http://example.com/docs/a.html?x=2 HTTP/1.1\r\nHost: example.com\r\n\r\n"
        request = parse_request(raw)

        assert request.path == "/docs/a.html"
        assert request.get_query("x") == "2"

    def test_empty_query_keeps_path(self):
        raw = b"GET /a.txt? HTTP/1.1\r\nHost: test\r\n\r\n"
        request = parse_request(raw)

        assert request.path == "/a.txt"
        assert request.query_params == {}

    def test_unknown_method_is_passed_through(self):
        """Method validation is the dispatcher's job (405)."""
        raw = b"PATCH /a.txt HTTP/1.1\r\nHost: test\r\n\r\n"

        assert parse_request(raw).method == "PATCH"

    def test_lowercase_method_is_malformed(self):
        raw = b"get / HTTP/1.1\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    def test_parse_invalid_request_line(self):
        """Test handling of malformed request line."""
        raw = b"GET\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError):
            parse_request(raw)

    def test_missing_header_terminator(self):
        with pytest.raises(HTTPParseError):
            parse_request(b"GET / HTTP/1.1\r\nHost: test\r\n")

    def test_parse_missing_headers(self):
        """Test parsing request with no headers."""
        raw = b"GET / HTTP/1.1\r\n\r\n"
        request = parse_request(raw)

        assert request.method == "GET"
        assert request.path == "/"
        assert len(request.headers) == 0

    def test_parse_request_too_large(self):
        """Test that oversized requests are rejected."""
        parser = RequestParser(max_request_size=100)
        raw = b"GET / HTTP/1.1\r\n" + b"X-Large: " + b"A" * 200 + b"\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parser.parse(raw)

        assert exc_info.value.status_code == 413

    def test_unsupported_version(self):
        raw = b"GET / HTTP/2.0\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 505

    def test_http_version_parsing(self):
        """Test HTTP/1.0 and HTTP/1.1 version handling."""
        request_10 = parse_request(b"GET / HTTP/1.0\r\nHost: test\r\n\r\n")
        assert request_10.version == "HTTP/1.0"
        assert request_10.is_keep_alive is False

        request_10_ka = parse_request(
            b"GET / HTTP/1.0\r\nConnection: keep-alive\r\n\r\n"
        )
        assert request_10_ka.is_keep_alive is True

        request_11 = parse_request(b"GET / HTTP/1.1\r\nHost: test\r\n\r\n")
        assert request_11.version == "HTTP/1.1"
        assert request_11.is_keep_alive is True

    def test_content_length_handling(self):
        """Body is cut to exactly Content-Length bytes."""
        raw = (
            b"POST / HTTP/1.1\r\n"
            b"Content-Length: 9\r\n"
            b"\r\n"
            b"test body and trailing bytes"
        )

        request = parse_request(raw)
        assert request.content_length == 9
        assert request.body == b"test body"

    def test_incomplete_body(self):
        raw = b"PUT /a.txt HTTP/1.1\r\nContent-Length: 50\r\n\r\nshort"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("value", [b"abc", b"-1"])
    def test_invalid_content_length(self, value: bytes):
        raw = b"PUT /a.txt HTTP/1.1\r\nContent-Length: " + value + b"\r\n\r\n"

        with pytest.raises(HTTPParseError):
            parse_request(raw)

    def test_case_insensitive_headers(self):
        """Test that header names are case-insensitive."""
        raw = b"GET / HTTP/1.1\r\nCONTENT-TYPE: text/html\r\n\r\n"
        request = parse_request(raw)

        assert request.get_header("Content-Type") == "text/html"
        assert request.get_header("content-type") == "text/html"

    def test_repeated_headers_are_joined(self):
        raw = b"GET / HTTP/1.1\r\nAccept: text/html\r\nAccept: text/plain\r\n\r\n"

        assert parse_request(raw).headers["accept"] == "text/html, text/plain"


class TestHTTPRequest:
    """Tests for HTTPRequest dataclass."""

    def test_get_header_default(self):
        """Test get_header with default value."""
        request = HTTPRequest(method="GET", path="/")

        assert request.get_header("X-Missing") == ""
        assert request.get_header("X-Missing", "default") == "default"

    def test_content_length_invalid(self):
        request = HTTPRequest(method="PUT", path="/", headers={"content-length": "x"})

        assert request.content_length == 0

    def test_connection_close(self):
        request = HTTPRequest(method="GET", path="/", headers={"connection": "close"})

        assert request.is_keep_alive is False
