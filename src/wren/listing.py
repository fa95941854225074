"""Directory listings in three representations.

Entries whose name starts with ``.`` are never listed, whatever the
dotfile policy of the request path. The HTML table is rendered with
kida; JSON and plain text are built directly.
"""

from __future__ import annotations

import json as json_module
import math
import os
import stat as stat_module
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from urllib.parse import quote

import anyio
from kida import Environment

from wren.http.response import AnyResponse, Response
from wren.negotiation import dispatch

_UNITS = " KMGTPEZY"

_LISTING_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Index of {{ path }}</title>
<style>table{border-spacing:2em .5em}\
body{font-family:monospace;font-size:1.5em;color:#fff;background-color:#222231}\
a{font-weight:bold;color:#54cbc0}a:not(:hover){text-decoration:none}\
td:nth-child(n+2){text-align:right;text-wrap:nowrap}</style>
</head>
<body>
<table>
<tr><th>Name</th><th>Date modified</th><th>Size</th></tr>
{% if parent %}<tr><td><a href="..">..</a></td></tr>
{% end %}{% for row in rows %}<tr><td><a href="{{ row.href }}">{{ row.name }}</a></td>\
<td>{{ row.modified }}</td>{% if row.size %}<td>{{ row.size }}</td>{% end %}</tr>
{% end %}</table>
</body>
</html>
"""

_env = Environment(autoescape=True)
_template = _env.from_string(_LISTING_TEMPLATE)


@dataclass(frozen=True, slots=True)
class ListingEntry:
    """One listed file or subdirectory."""

    name: str
    size: int
    ctime: datetime
    mtime: datetime
    is_dir: bool = False

    @property
    def display_name(self) -> str:
        """Name with a trailing ``/`` for directories."""
        return f"{self.name}/" if self.is_dir else self.name

    @classmethod
    def from_stat(cls, name: str, st: os.stat_result) -> ListingEntry:
        # Creation time where the platform records it, else inode change time
        created = getattr(st, "st_birthtime", st.st_ctime)
        return cls(
            name=name,
            size=st.st_size,
            ctime=datetime.fromtimestamp(created, UTC),
            mtime=datetime.fromtimestamp(st.st_mtime, UTC),
            is_dir=stat_module.S_ISDIR(st.st_mode),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.display_name,
            "size": self.size,
            "ctime": _iso(self.ctime),
            "mtime": _iso(self.mtime),
        }


@dataclass(frozen=True, slots=True)
class _Row:
    href: str
    name: str
    modified: str
    size: str


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_size(size: int) -> str:
    """Human-readable size in binary units, truncated to one decimal.

    ``format_size(1536) == "1.5 KiB"``; bytes carry no ``i``: ``"512.0 B"``.
    """
    unit = 0
    scaled = float(size)
    while scaled >= 1024 and unit < len(_UNITS) - 1:
        scaled /= 1024
        unit += 1
    value = math.trunc(scaled * 10) / 10
    symbol = f"{_UNITS[unit]}iB" if unit else "B"
    return f"{value:.1f} {symbol}"


async def list_directory(directory: str | Path) -> list[ListingEntry]:
    """Enumerate and stat the non-dotfile entries of *directory*, sorted by name."""
    entries: list[ListingEntry] = []
    async for child in anyio.Path(directory).iterdir():
        if child.name.startswith("."):
            continue
        try:
            st = await child.stat()
        except FileNotFoundError:
            # Dangling symlink: list the link itself
            st = await child.lstat()
        entries.append(ListingEntry.from_stat(child.name, st))
    entries.sort(key=lambda entry: entry.name)
    return entries


def _link_base(path: str) -> str:
    """Relative prefix for links to the entries of the listed directory.

    Links stay relative so they resolve in the client's URL space, which
    differs from *path* after a rewrite or when the ``//`` marker was used.
    """
    if path.endswith("/"):
        return "./"
    return f"./{quote(path.rsplit('/', 1)[-1])}/"


def render_html(entries: list[ListingEntry], path: str) -> str:
    """Render the HTML table for a listing of request *path*."""
    base = _link_base(path)
    rows = [
        _Row(
            href=base + quote(entry.display_name),
            name=entry.display_name,
            modified=entry.mtime.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            size=format_size(entry.size) if entry.size else "",
        )
        for entry in entries
    ]
    return _template.render({"path": path, "parent": path not in ("", "/"), "rows": rows})


def render_json(entries: list[ListingEntry]) -> str:
    return json_module.dumps([entry.to_dict() for entry in entries])


def render_text(entries: list[ListingEntry]) -> str:
    return ",".join(entry.display_name for entry in entries)


def listing_response(entries: list[ListingEntry], path: str, accept: str | None) -> AnyResponse:
    """Negotiate and render a listing of request *path*."""
    return dispatch(
        accept,
        {
            "html": lambda: Response(render_html(entries, path)),
            "json": lambda: Response(
                render_json(entries), content_type="application/json; charset=utf-8"
            ),
            "text": lambda: Response(
                render_text(entries), content_type="text/plain; charset=utf-8"
            ),
        },
    )
