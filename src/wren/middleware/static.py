"""Static file serving middleware.

Resolves the request path against a root directory and answers with the
file, a trailing-slash redirect, or a negotiated directory listing.

A path starting with ``//`` forces listing mode: the extra slash is
dropped and index substitution is disabled for that request.

Policy misses (dotfile deny/ignore, not found) either finalize with a
negotiated error page or, with ``fallthrough`` enabled, record the
decided status and hand the request to the next stage.
"""

from collections.abc import Callable
from dataclasses import replace
from importlib import resources
from pathlib import Path

import anyio

from wren.cache import fingerprint, matches
from wren.config import StaticOptions
from wren.context import status_var
from wren.http.request import Request
from wren.http.response import AnyResponse, FileResponse, redirect
from wren.listing import list_directory, listing_response
from wren.middleware.protocol import Next
from wren.mime import lookup
from wren.pages import ErrorPages
from wren.resolver import DirectoryTarget, FileTarget, Miss, PathResolver, SlashRedirect

POWERED_BY = "wren"
LISTING_MARKER = "//"
FAVICON_PATH = "/favicon.ico"


class StaticFiles:
    """Middleware that serves files and listings from a directory.

    Only GET and HEAD are served; other methods go straight to the next
    stage.

    Usage::

        app.add_middleware(StaticFiles(
            directory="./public",
            options=StaticOptions(extensions=("html", "htm"), max_age=60),
        ))
    """

    __slots__ = ("_listing_options", "_mime_lookup", "_options", "_pages", "_resolver")

    def __init__(
        self,
        directory: str | Path,
        options: StaticOptions | None = None,
        *,
        pages: ErrorPages | None = None,
        mime_lookup: Callable[[str], str] = lookup,
    ) -> None:
        self._resolver = PathResolver(directory)
        self._options = options or StaticOptions()
        self._listing_options = replace(self._options, index=None)
        self._pages = pages or ErrorPages()
        self._mime_lookup = mime_lookup

    @property
    def options(self) -> StaticOptions:
        return self._options

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        """Serve a file or listing, or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        path = request.path
        options = self._options
        listing_mode = path.startswith(LISTING_MARKER)
        if listing_mode:
            path = path[1:]
            options = self._listing_options

        target = await self._resolver.resolve(path, options)

        match target:
            case FileTarget():
                return self._serve_file(request, target, options)
            case DirectoryTarget(path=directory):
                entries = await list_directory(directory)
                return listing_response(entries, path, request.accept).with_header(
                    "X-Powered-By", POWERED_BY
                )
            case SlashRedirect(location=location):
                if listing_mode:
                    location = "/" + location
                return redirect(location, request.query_string)
            case Miss(status=404) if path == FAVICON_PATH:
                return await self._bundled_favicon(options)
            case Miss(status=status):
                return await self._handle_miss(request, next, status)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _serve_file(
        self,
        request: Request,
        target: FileTarget,
        options: StaticOptions,
    ) -> AnyResponse:
        """Build the file response, or 304 when the client's ETag matches."""
        response = (
            FileResponse(
                path=target.path,
                size=target.size,
                content_type=self._mime_lookup(str(target.path)),
            )
            .with_header("X-Powered-By", POWERED_BY)
            .with_header("Cache-Control", options.cache_control)
        )

        if not options.etag:
            return response

        etag = fingerprint(target.stat)
        response = response.with_header("ETag", etag)
        if matches(etag, request.if_none_match):
            return response.with_status(304)
        return response

    async def _bundled_favicon(self, options: StaticOptions) -> AnyResponse:
        """Serve the packaged icon when the root has no favicon of its own."""
        icon = Path(str(resources.files("wren.assets").joinpath("favicon.ico")))
        st = await anyio.Path(icon).stat()
        return (
            FileResponse(path=icon, size=st.st_size, content_type=self._mime_lookup(str(icon)))
            .with_header("X-Powered-By", POWERED_BY)
            .with_header("Cache-Control", options.cache_control)
        )

    async def _handle_miss(self, request: Request, next: Next, status: int) -> AnyResponse:
        """Finalize a policy miss, or record its status and fall through."""
        if not self._options.fallthrough:
            return self._pages.response(status, request.accept)

        token = status_var.set(status)
        try:
            return await next(request)
        finally:
            status_var.reset(token)

