"""Wren application class.

Mutable during setup (extra middleware). Frozen at runtime when
``app.run()`` or ``__call__()`` is first invoked: the route file and
error pages are loaded once and the pipeline is compiled.
"""

import logging
import threading
from pathlib import Path

from wren._internal.asgi import Receive, Scope, Send
from wren.config import ServerConfig
from wren.middleware.protocol import Middleware, Next
from wren.pages import ErrorPages
from wren.pipeline import build_chain, default_middleware, fallback
from wren.routing.engine import RouteEngine
from wren.routing.table import RouteTable
from wren.server.handler import handle_request

logger = logging.getLogger("wren.server")


class App:
    """The wren static file application.

    Usage::

        app = App(ServerConfig(root="./public", port=8080))
        app.run()

    ``routes`` and ``pages`` override what would otherwise be loaded from
    ``config.routes_file`` and the configured error page paths.

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread loads the route file and error pages, even when several
        ASGI workers call ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_handler",
        "_middleware_list",
        "_pages",
        "_routes",
        "config",
    )

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        routes: RouteTable | None = None,
        pages: ErrorPages | None = None,
    ) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self._routes = routes
        self._pages = pages
        self._middleware_list: list[Middleware] = []
        self._handler: Next | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    @property
    def root(self) -> Path:
        return Path(self.config.root).resolve()

    @property
    def pages(self) -> ErrorPages:
        """The loaded error pages. Freezes the app."""
        self._ensure_frozen()
        assert self._pages is not None
        return self._pages

    @property
    def routes(self) -> RouteTable:
        """The loaded route table. Freezes the app."""
        self._ensure_frozen()
        assert self._routes is not None
        return self._routes

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a stage after static resolution and before the fallback page.

        Such stages only see requests the static stage fell through on.
        """
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Load configuration and serve until interrupted."""
        self._ensure_frozen()

        from wren.server.serve import run_server

        _host = host or self.config.host
        _port = self.config.port if port is None else port
        logger.info("Serving %s on http://%s:%d", self.root, _host, _port)
        run_server(self, _host, _port, log_level=self.config.log_level)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._handler is not None
        assert self._pages is not None

        await handle_request(
            scope,
            receive,
            send,
            handler=self._handler,
            pages=self._pages,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol, freezing the app at startup."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Load configuration files and compile the pipeline.

        MUST only be called while holding _freeze_lock. Raises
        ``ConfigurationError`` for a malformed route file.
        """
        config = self.config

        # 1. Route table
        if self._routes is None:
            self._routes = RouteTable.from_file(config.routes_file)
        if self._routes:
            logger.info("Loaded %d route rule(s)", len(self._routes))

        # 2. Error pages
        if self._pages is None:
            self._pages = ErrorPages.load(config.not_found_page, config.error_page)

        # 3. Pipeline
        middleware = default_middleware(
            config.root,
            engine=RouteEngine(self._routes),
            options=config.static,
            pages=self._pages,
            extra=self._middleware_list,
        )
        self._handler = build_chain(middleware, fallback(self._pages))
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Add middleware before calling app.run()."
            )
            raise RuntimeError(msg)
