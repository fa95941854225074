"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> AnyResponse: ...

No base class required. The framework checks the shape, not the lineage.
``Response`` and ``FileResponse`` share the ``.with_header()`` /
``.with_status()`` chainable API, so middleware can modify either.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from wren.http.request import Request
from wren.http.response import AnyResponse

# The next stage in the middleware chain
type Next = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Protocol for wren middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def no_cache(request: Request, next: Next) -> AnyResponse:
            response = await next(request)
            return response.with_header("Cache-Control", "no-store")

        # Class middleware
        class SpaFallback:
            async def __call__(self, request: Request, next: Next) -> AnyResponse:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
