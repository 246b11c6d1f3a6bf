"""
=============================================================================
REQUEST DISPATCHER
=============================================================================

The single entry point of the file server: takes an HTTPRequest, returns
exactly one HTTPResponse.

=============================================================================
DISPATCH
=============================================================================

    request
      │
      ├── counter.increment()          ← always, before any decision
      │
      ├── stats routes enabled?        "/", "/stats", "/increment"
      │     └── exact path match       → StatsHandler
      │
      ├── file routes disabled?        → 404
      │
      └── method switch
            GET          → FileResponder.handle_get
            HEAD         → FileResponder.handle_head
            POST, PUT    → MutationHandler.handle_write
            DELETE       → MutationHandler.handle_delete
            anything else → 405

=============================================================================
FAILURES
=============================================================================

    HTTPError raised anywhere below  → its own status response
    any other exception              → 500, logged with traceback

Nothing escapes ``handle``. The connection layer always has a response to
send.

=============================================================================
"""

import logging
from typing import Callable, Dict, Optional

from .config import ServerConfig
from .counter import RequestCounter
from .errors import HTTPError, MethodNotAllowed, NotFound
from .handlers import FileResponder, MutationHandler, StatsHandler
from .http.request import HTTPRequest
from .http.response import HTTPResponse, error_response
from .http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)

Handler = Callable[[HTTPRequest], HTTPResponse]


class RequestDispatcher:
    """
    Routes requests by method and path.

    Usage:
        dispatcher = RequestDispatcher(ServerConfig(web_root="./site"))
        response = dispatcher.handle(request)
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        counter: Optional[RequestCounter] = None,
    ):
        self.config = config or ServerConfig()
        self.counter = counter or RequestCounter()

        self.files = FileResponder(self.config.web_root)
        self.mutations = MutationHandler(self.config.web_root)
        self.stats: Optional[StatsHandler] = (
            StatsHandler(self.counter) if self.config.enable_stats else None
        )

        self._methods: Dict[str, Handler] = {
            "GET": self.files.get,
            "HEAD": self.files.head,
            "POST": self.mutations.write,
            "PUT": self.mutations.write,
            "DELETE": self.mutations.delete,
        }

    @property
    def allowed_methods(self) -> list[str]:
        return list(self._methods) if self.config.enable_files else []

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle(request)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Count the request, dispatch it, and never raise."""
        self.counter.increment()

        try:
            return self._dispatch(request)
        except HTTPError as e:
            return e.to_response()
        except Exception as e:
            logger.exception(f"Unhandled error for {request.method} {request.path}: {e}")
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR)

    def _dispatch(self, request: HTTPRequest) -> HTTPResponse:
        if self.stats is not None:
            response = self.stats.route(request)
            if response is not None:
                return response

        if not self.config.enable_files:
            raise NotFound()

        handler = self._methods.get(request.method)
        if handler is None:
            response = MethodNotAllowed().to_response()
            return response.set_header("Allow", ", ".join(self.allowed_methods))
        return handler(request)
