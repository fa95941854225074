"""Conditional-request validators.

The ETag is a weak, metadata-only fingerprint: file size and modification
time (milliseconds), both in hex::

    W/"1a2b-18f3c2d4e10"

No content hash is computed. A file rewritten with identical size inside
the same filesystem clock tick keeps its ETag.
"""

import os


def fingerprint(stat: os.stat_result) -> str:
    """Compute the ETag for a file's stat result.

    Deterministic for unchanged files; any change to size or mtime
    yields a different token.
    """
    mtime_ms = stat.st_mtime_ns // 1_000_000
    return f'W/"{stat.st_size:x}-{mtime_ms:x}"'


def matches(etag: str, if_none_match: str | None) -> bool:
    """True iff the client's ``If-None-Match`` value equals *etag* exactly."""
    return if_none_match is not None and if_none_match == etag
