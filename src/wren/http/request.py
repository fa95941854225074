"""Immutable HTTP request.

Frozen metadata built once from the ASGI scope. Static resolution never
reads a request body, so only the receive callable is kept (for
disconnect detection while a file body streams).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from wren._internal.asgi import Receive
from wren.http.headers import Headers


async def _no_receive() -> dict[str, Any]:
    return {"type": "http.disconnect"}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is percent-decoded (as ASGI delivers it). Middleware that
    rewrites the path returns a new request via :meth:`with_path`.
    """

    method: str
    path: str
    headers: Headers
    query_string: str = ""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable
    _receive: Receive = _no_receive

    # -- Computed properties --

    @property
    def accept(self) -> str | None:
        """The ``Accept`` header value."""
        return self.headers.get("accept")

    @property
    def if_none_match(self) -> str | None:
        """The ``If-None-Match`` header value."""
        return self.headers.get("if-none-match")

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @property
    def is_head(self) -> bool:
        return self.method == "HEAD"

    # -- Transformations --

    def with_path(self, path: str) -> Request:
        """Return a copy of this request addressing *path*."""
        return replace(self, path=path)

    async def receive(self) -> dict[str, Any]:
        """Await the next ASGI message (e.g. ``http.disconnect``)."""
        return dict(await self._receive())

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers.from_raw(scope.get("headers", ())),
            query_string=scope.get("query_string", b"").decode("latin-1"),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
