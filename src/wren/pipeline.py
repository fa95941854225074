"""The resolution pipeline: an ordered chain of middleware stages.

Each stage either finalizes a response or awaits ``next`` with a
(possibly rewritten) request. The terminal stage answers whatever the
earlier stages left unanswered with an error page, using the status a
fallthrough stage decided or 404.

Default order::

    AccessLog -> RouteRewrite -> StaticFiles -> <user stages> -> fallback
"""

from collections.abc import Iterable, Sequence
from pathlib import Path

from wren.config import StaticOptions
from wren.context import decided_status
from wren.http.request import Request
from wren.http.response import AnyResponse
from wren.middleware.access_log import AccessLog
from wren.middleware.protocol import Middleware, Next
from wren.middleware.routes import RouteRewrite
from wren.middleware.static import StaticFiles
from wren.pages import ErrorPages
from wren.routing.engine import RouteEngine


def fallback(pages: ErrorPages) -> Next:
    """Terminal stage: a negotiated error page for the decided status."""

    async def endpoint(request: Request) -> AnyResponse:
        return pages.response(decided_status(), request.accept)

    return endpoint


def build_chain(middleware: Sequence[Middleware], endpoint: Next) -> Next:
    """Wrap *endpoint* in *middleware*, first stage outermost."""
    handler = endpoint
    for mw in reversed(middleware):
        outer = handler

        async def make_next(req: Request, _mw: Middleware = mw, _next: Next = outer) -> AnyResponse:
            return await _mw(req, _next)

        handler = make_next
    return handler


def default_middleware(
    root: str | Path,
    *,
    engine: RouteEngine,
    options: StaticOptions,
    pages: ErrorPages,
    extra: Iterable[Middleware] = (),
) -> tuple[Middleware, ...]:
    """The standard stages for serving *root*."""
    return (
        AccessLog(),
        RouteRewrite(engine),
        StaticFiles(root, options, pages=pages),
        *extra,
    )
