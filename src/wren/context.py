"""Request-scoped context via ContextVar.

Provides:
- ``request_var``: the current ``Request`` for this task.
- ``status_var``: the status a fallthrough stage has already decided
  (e.g. 403 for a denied dotfile), read by later stages.

Both are set by the handler pipeline and reset after each request.
``ContextVar`` is task-local under asyncio, so concurrent requests never
see each other's values.
"""

from contextvars import ContextVar

from wren.http.request import Request

request_var: ContextVar[Request] = ContextVar("wren_request")
"""The current request. Set by the ASGI handler before dispatch."""

status_var: ContextVar[int | None] = ContextVar("wren_status", default=None)
"""Status decided by an earlier stage that fell through, if any."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


def decided_status(default: int = 404) -> int:
    """The status an earlier stage decided, or *default*."""
    status = status_var.get()
    return default if status is None else status
