"""
=============================================================================
STATIC ROUTES: HOME, STATS, INCREMENT
=============================================================================

Fixed endpoints matched by exact path, before any filesystem routing.

    /            200 HTML greeting
    /stats       200 {"uptimeSeconds": "12.34", "totalRequests": 42}
    /increment   POST → 200 {"success": true, "count": 42}
                 anything else → 405

"totalRequests" and "count" read the dispatcher's request counter, which
already includes the request being answered.

=============================================================================
"""

from typing import Callable, Dict, Optional

from ..errors import MethodNotAllowed
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder
from ..http.status_codes import HTTPStatus
from ..counter import RequestCounter


GREETING = "<h1>fileserver</h1>"

RouteHandler = Callable[[HTTPRequest], HTTPResponse]


class StatsHandler:
    """
    Home, stats and increment endpoints.

    Usage:
        stats = StatsHandler(counter)
        response = stats.route(request)   # None when the path is not ours
    """

    def __init__(self, counter: RequestCounter, greeting: str = GREETING):
        self.counter = counter
        self.greeting = greeting
        self._routes: Dict[str, RouteHandler] = {
            "/": self.home,
            "/stats": self.stats,
            "/increment": self.increment,
        }

    @property
    def paths(self) -> list[str]:
        return list(self._routes)

    def route(self, request: HTTPRequest) -> Optional[HTTPResponse]:
        """Answer the request if its path is one of ours, else None."""
        handler = self._routes.get(request.path)
        if handler is None:
            return None
        return handler(request)

    def home(self, request: HTTPRequest) -> HTTPResponse:
        return ResponseBuilder().html(self.greeting).build()

    def stats(self, request: HTTPRequest) -> HTTPResponse:
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .json({
                "uptimeSeconds": f"{self.counter.uptime:.2f}",
                "totalRequests": self.counter.count,
            })
            .build())

    def increment(self, request: HTTPRequest) -> HTTPResponse:
        if request.method != "POST":
            raise MethodNotAllowed()
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .json({"success": True, "count": self.counter.count})
            .build())
