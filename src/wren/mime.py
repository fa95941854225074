"""MIME type lookup keyed by file extension.

Wraps a private ``mimetypes.MimeTypes`` table (so the host's registry
can't be mutated underneath it) with a few web types that older system
tables miss.
"""

import mimetypes
from pathlib import PurePath

DEFAULT_TYPE = "application/octet-stream"

_EXTRA_TYPES: dict[str, str] = {
    ".mjs": "text/javascript",
    ".js": "text/javascript",
    ".wasm": "application/wasm",
    ".webmanifest": "application/manifest+json",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".md": "text/markdown",
}

_table = mimetypes.MimeTypes()
for _ext, _type in _EXTRA_TYPES.items():
    _table.add_type(_type, _ext)


def lookup(path: str | PurePath, fallback: str = DEFAULT_TYPE) -> str:
    """Return the media type for *path*'s extension, or *fallback*."""
    suffix = PurePath(path).suffix.lower()
    if not suffix:
        return fallback
    media_type, _ = _table.guess_type(f"file{suffix}", strict=False)
    return media_type or fallback
