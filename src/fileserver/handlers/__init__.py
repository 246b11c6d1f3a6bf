"""
=============================================================================
REQUEST HANDLERS
=============================================================================

    paths.py      URL path → filesystem path, ".." checks
    files.py      FileResponder: GET / HEAD
    mutations.py  MutationHandler: POST / PUT / DELETE
    stats.py      StatsHandler: "/", "/stats", "/increment"

Every handler method returns an HTTPResponse for every outcome, errors
included. Filesystem failures are turned into 500 responses inside the
handler.

=============================================================================
"""

from .paths import (
    resolve_path,
    has_traversal,
    check_traversal,
    has_parent_segment,
    check_parent_segment,
)
from .files import FileResponder
from .mutations import MutationHandler
from .stats import StatsHandler

__all__ = [
    "resolve_path",
    "has_traversal",
    "check_traversal",
    "has_parent_segment",
    "check_parent_segment",
    "FileResponder",
    "MutationHandler",
    "StatsHandler",
]
