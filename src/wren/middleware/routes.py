"""Route rewrite middleware.

Applies the route table before any filesystem work. A redirect rule
answers immediately with a 302; a rewrite rule hands a request with the
new path to the next stage.
"""

from wren.http.request import Request
from wren.http.response import AnyResponse, redirect
from wren.middleware.protocol import Next
from wren.routing.engine import RouteEngine


class RouteRewrite:
    """Middleware that rewrites or redirects request paths.

    Usage::

        engine = RouteEngine(RouteTable.from_file(".routes"))
        app.add_middleware(RouteRewrite(engine))
    """

    __slots__ = ("_engine",)

    def __init__(self, engine: RouteEngine) -> None:
        self._engine = engine

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        result = self._engine.resolve(request.path)
        if result.redirect:
            return redirect(result.path, request.query_string)
        if result.path != request.path:
            request = request.with_path(result.path)
        return await next(request)
