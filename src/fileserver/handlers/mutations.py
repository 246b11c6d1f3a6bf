"""
=============================================================================
MUTATION HANDLER (POST / PUT / DELETE)
=============================================================================

Creates, overwrites and deletes files under the web root.

=============================================================================
WRITE (POST and PUT are identical)
=============================================================================

    PUT /notes/a.txt  body=b"hello"
      │
      ├── contains ".."?          → 403 Forbidden
      ├── resolve under web_root
      ├── mkdir -p web_root/notes  (failure is logged, write still attempted)
      ├── write body, truncating any existing file
      └── 201 Created             (write failure → 500)

Both verbs overwrite the whole file. There is no append mode.

=============================================================================
DELETE
=============================================================================

    DELETE /notes/a.txt
      │
      ├── contains ".."?          → 403 Forbidden
      ├── missing?                → 404 Not Found
      ├── delete strategies, in order, until one succeeds:
      │     1. unlink
      │     2. truncate to zero bytes, then unlink
      ├── 204 No Content, empty body
      └── every strategy failed   → 500

Some filesystems refuse to unlink a file that is open elsewhere or that
the process may write but not remove directly. The second strategy covers
those cases. An empty directory is removed with rmdir and has no second
strategy.

=============================================================================
CONCURRENCY
=============================================================================

Nothing here is locked. A write and a delete racing on the same path end
with whichever finished last.

=============================================================================
"""

import logging
import os
from pathlib import Path
from typing import Callable, Sequence

from ..errors import HTTPError, NotFound
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, error_response, no_content
from ..http.status_codes import HTTPStatus
from .paths import check_traversal, resolve_path


logger = logging.getLogger(__name__)

DeleteStrategy = Callable[[Path], None]


def unlink(target: Path) -> None:
    target.unlink()


def truncate_then_unlink(target: Path) -> None:
    with open(target, "wb"):
        pass
    os.unlink(target)


def remove_directory(target: Path) -> None:
    target.rmdir()


FILE_DELETE_STRATEGIES: Sequence[DeleteStrategy] = (unlink, truncate_then_unlink)
DIRECTORY_DELETE_STRATEGIES: Sequence[DeleteStrategy] = (remove_directory,)


class MutationHandler:
    """
    Handler for POST, PUT and DELETE requests.

    Usage:
        mutations = MutationHandler("./web_root")
        mutations.handle_write("/notes/a.txt", b"hello")   # 201
        mutations.handle_delete("/notes/a.txt")            # 204
    """

    def __init__(
        self,
        web_root: str,
        file_strategies: Sequence[DeleteStrategy] = FILE_DELETE_STRATEGIES,
        directory_strategies: Sequence[DeleteStrategy] = DIRECTORY_DELETE_STRATEGIES,
    ):
        self.web_root = web_root
        self.file_strategies = tuple(file_strategies)
        self.directory_strategies = tuple(directory_strategies)

    # Request-level adapters used by the dispatcher

    def write(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle_write(request.path, request.body)

    def delete(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle_delete(request.path)

    def handle_write(self, path: str, body: bytes) -> HTTPResponse:
        """Write ``body`` as the whole content of the file at ``path``."""
        try:
            check_traversal(path)
            target = Path(resolve_path(path, self.web_root))
            self._ensure_parent(target)
            target.write_bytes(body)
        except HTTPError as e:
            return e.to_response()
        except OSError as e:
            logger.error(f"Error writing {path!r}: {e}")
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR)

        logger.debug(f"Wrote {len(body)} bytes to {target}")
        return error_response(HTTPStatus.CREATED, "Created")

    def handle_delete(self, path: str) -> HTTPResponse:
        """Remove the file at ``path``."""
        try:
            check_traversal(path)
            target = Path(resolve_path(path, self.web_root))
            if not target.exists():
                raise NotFound()
            self._delete(target)
        except HTTPError as e:
            return e.to_response()
        except OSError as e:
            logger.error(f"Error deleting {path!r}: {e}")
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR)

        logger.debug(f"Deleted {target}")
        return no_content()

    def _ensure_parent(self, target: Path) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create {target.parent}: {e}")

    def _delete(self, target: Path) -> None:
        """
        Run the delete strategies for ``target`` in order.

        Raises:
            OSError: The error of the last strategy when all of them fail.
        """
        strategies = self.directory_strategies if target.is_dir() else self.file_strategies
        last_error: OSError = OSError(f"No delete strategy for {target}")
        for strategy in strategies:
            try:
                strategy(target)
                return
            except OSError as e:
                name = getattr(strategy, "__name__", repr(strategy))
                logger.warning(f"Delete strategy {name} failed for {target}: {e}")
                last_error = e
        raise last_error
