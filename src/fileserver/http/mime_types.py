"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps a file extension to the Content-Type sent with it.

=============================================================================
LOOKUP RULES
=============================================================================

    "/docs/Report.PDF"
             │    └── everything after the LAST "." → "PDF"
             │
             └── lower-cased → "pdf" → MIME_TYPES["pdf"] → application/pdf

    No "." at all           → application/octet-stream
    Extension not in table  → application/octet-stream

The extension is taken from the whole path string, not just the final
component, so "/v1.2/readme" yields "2/readme", which is not in the table
and therefore falls back to application/octet-stream.

=============================================================================
CHARSET
=============================================================================

Text formats are served with an explicit charset so browsers never have to
guess the encoding:

    page.html   → text/html; charset=utf-8
    app.js      → application/javascript; charset=utf-8
    data.json   → application/json; charset=utf-8
    logo.png    → image/png

=============================================================================
"""

from types import MappingProxyType
from typing import Mapping


# Lowercase extension (no leading dot) → MIME type. Read-only after import.
MIME_TYPES: Mapping[str, str] = MappingProxyType({
    # Text
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "txt": "text/plain",
    "xml": "application/xml",

    # Images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "ico": "image/x-icon",
    "svg": "image/svg+xml",

    # Documents
    "pdf": "application/pdf",
})

# "I don't know what this is, treat it as binary"
DEFAULT_MIME_TYPE = "application/octet-stream"

# application/* types that are really text and get a charset parameter
_TEXT_APPLICATION_TYPES = frozenset({
    "application/javascript",
    "application/json",
    "application/xml",
})


def get_extension(path: str) -> str:
    """
    Return the lowercase substring after the last "." in ``path``.

    Returns an empty string when the path has no "." at all.

        >>> get_extension("/img/Logo.PNG")
        'png'
        >>> get_extension("/LICENSE")
        ''
    """
    dot = path.rfind(".")
    if dot == -1:
        return ""
    return path[dot + 1:].lower()


def get_mime_type(path: str) -> str:
    """
    Get the MIME type for a path based on its extension.

    Total function: every input maps to some type, unknown or missing
    extensions map to ``application/octet-stream``.

        >>> get_mime_type("style.css")
        'text/css'
        >>> get_mime_type("archive.xyz")
        'application/octet-stream'
    """
    return MIME_TYPES.get(get_extension(path), DEFAULT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    """Check whether a MIME type should carry a charset parameter."""
    return mime_type.startswith("text/") or mime_type in _TEXT_APPLICATION_TYPES


def get_content_type(path: str, charset: str = "utf-8") -> str:
    """
    Get the full Content-Type header value for a path.

        >>> get_content_type("index.html")
        'text/html; charset=utf-8'
        >>> get_content_type("photo.jpg")
        'image/jpeg'
    """
    mime_type = get_mime_type(path)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type
