"""
Unit tests for the middleware pipeline and access logging.
"""

import json
import logging

import pytest

from fileserver.http.request import HTTPRequest
from fileserver.http.response import HTTPResponse, ResponseBuilder
from fileserver.middleware import LoggingMiddleware, Middleware, MiddlewarePipeline


class Recorder(Middleware):
    def __init__(self, label: str, calls: list):
        self.label = label
        self.calls = calls

    def __call__(self, request, next):
        self.calls.append(f"{self.label}:before")
        response = next(request)
        self.calls.append(f"{self.label}:after")
        return response


class ShortCircuit(Middleware):
    def __call__(self, request, next):
        return ResponseBuilder().status(503).build()


def ok_handler(request: HTTPRequest) -> HTTPResponse:
    return ResponseBuilder().text("ok").build()


@pytest.fixture
def request_() -> HTTPRequest:
    return HTTPRequest(
        method="GET",
        path="/a.txt",
        headers={"user-agent": "pytest"},
        client_address=("10.0.0.7", 5555),
    )


class TestMiddlewarePipeline:
    """Tests for MiddlewarePipeline."""

    def test_empty_pipeline_returns_handler(self):
        assert MiddlewarePipeline().wrap(ok_handler) is ok_handler

    def test_order(self, request_):
        calls = []
        pipeline = MiddlewarePipeline().use(Recorder("a", calls), Recorder("b", calls))

        pipeline.wrap(ok_handler)(request_)

        assert calls == ["a:before", "b:before", "b:after", "a:after"]
        assert len(pipeline) == 2

    def test_short_circuit(self, request_):
        calls = []
        pipeline = MiddlewarePipeline().add(ShortCircuit()).add(Recorder("inner", calls))

        response = pipeline.wrap(ok_handler)(request_)

        assert response.status == 503
        assert calls == []


class TestLoggingMiddleware:
    """Tests for LoggingMiddleware."""

    def test_text_line(self, request_, caplog):
        middleware = LoggingMiddleware()

        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            response = middleware(request_, ok_handler)

        assert len(response.headers["X-Request-ID"]) == 8
        line = caplog.records[-1].getMessage()
        assert line.startswith("10.0.0.7 - - [")
        assert '"GET /a.txt" 200 2 ' in line

    def test_json_line(self, request_, caplog):
        middleware = LoggingMiddleware(log_format="json")

        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            response = middleware(request_, ok_handler)

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["request_id"] == response.headers["X-Request-ID"]
        assert entry["method"] == "GET"
        assert entry["path"] == "/a.txt"
        assert entry["client_ip"] == "10.0.0.7"
        assert entry["user_agent"] == "pytest"
        assert entry["status_code"] == 200
        assert entry["content_length"] == 2

    def test_declared_length_is_logged(self, request_, caplog):
        """HEAD-style responses report their Content-Length, not 0."""
        def head_handler(request):
            return ResponseBuilder().header("Content-Length", "4096").build()

        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            LoggingMiddleware(log_format="json")(request_, head_handler)

        assert json.loads(caplog.records[-1].getMessage())["content_length"] == 4096

    def test_skip_paths(self, request_, caplog):
        middleware = LoggingMiddleware(skip_paths=["/a.txt"])

        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            middleware(request_, ok_handler)

        assert not [r for r in caplog.records if r.name == "fileserver.access"]

    def test_without_request_id(self, request_):
        response = LoggingMiddleware(include_request_id=False)(request_, ok_handler)

        assert "X-Request-ID" not in response.headers

    def test_exception_is_logged_and_reraised(self, request_, caplog):
        def broken(request):
            raise RuntimeError("boom")

        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            with pytest.raises(RuntimeError):
                LoggingMiddleware()(request_, broken)

        assert "RuntimeError: boom" in caplog.records[-1].getMessage()

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            LoggingMiddleware(log_format="xml")
