"""
=============================================================================
URL PATH → FILESYSTEM PATH
=============================================================================

    web_root = "./web_root"

    "/notes/a.txt"   → "./web_root/notes/a.txt"
    "notes/a.txt"    → "./web_root/notes/a.txt"
    "//etc/passwd"   → "./web_root//etc/passwd"   (only ONE "/" is stripped)

Resolution is plain string concatenation. Nothing is canonicalized and
symlinks are not followed, so confinement depends on the caller rejecting
".." before resolving.

=============================================================================
TRAVERSAL CHECKS
=============================================================================

Writes and deletes use a substring test for "..":

    "/../etc/passwd"     rejected
    "/a/..hidden"        rejected as well (legitimate name, false positive)
    "/%2e%2e/x"          rejected, the parser percent-decodes first

Reads only reject a path with a ".." segment, so any stored file can be
fetched back, dots in its name or not:

    "/../etc/passwd"     rejected
    "/a/b/../../../x"    rejected
    "/notes..txt"        served
    "/a/..hidden"        served

=============================================================================
"""

import logging

from ..errors import Forbidden


logger = logging.getLogger(__name__)

TRAVERSAL_MARKER = ".."


def has_traversal(request_path: str) -> bool:
    """True when the raw request path contains "..", anywhere."""
    return TRAVERSAL_MARKER in request_path


def check_traversal(request_path: str) -> None:
    """
    Reject a path that could escape the web root.

    Raises:
        Forbidden: If the path contains "..".
    """
    if has_traversal(request_path):
        logger.warning(f"Path traversal attempt: {request_path!r}")
        raise Forbidden()


def has_parent_segment(request_path: str) -> bool:
    """True when one "/"-separated segment of the path is exactly ".."."""
    return TRAVERSAL_MARKER in request_path.split("/")


def check_parent_segment(request_path: str) -> None:
    """
    Reject a read that steps above the web root.

    Raises:
        Forbidden: If a path segment is "..".
    """
    if has_parent_segment(request_path):
        logger.warning(f"Path traversal attempt: {request_path!r}")
        raise Forbidden()


def resolve_path(request_path: str, web_root: str) -> str:
    """
    Map a request path to a filesystem path under ``web_root``.

    Strips a single leading "/" and joins with "/". The root path is NOT
    translated to index.html here; the GET handler does that first.
    """
    if request_path.startswith("/"):
        request_path = request_path[1:]
    return f"{web_root.rstrip('/')}/{request_path}"
