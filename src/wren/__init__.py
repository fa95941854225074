"""Wren: a local static file server.

Serves a directory over HTTP with route rewriting, directory listings,
ETag revalidation, and HTML/JSON/text content negotiation. Runs as an
ASGI application.

Basic usage::

    from wren import App, ServerConfig, StaticOptions

    app = App(ServerConfig(
        root="./public",
        port=8080,
        static=StaticOptions(extensions=("html",)),
    ))
    app.run()

Or from a shell::

    wren ./public -p 8080 -x html
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "ConfigurationError",
    "FileResponse",
    "HTTPError",
    "Middleware",
    "Next",
    "Request",
    "Response",
    "RouteSyntaxError",
    "RouteTable",
    "ServerConfig",
    "StaticOptions",
    "WrenError",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name in ("ServerConfig", "StaticOptions"):
        from wren import config

        return getattr(config, name)

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("Response", "FileResponse", "AnyResponse"):
        from wren.http import response

        return getattr(response, name)

    if name in ("Middleware", "Next"):
        from wren.middleware import protocol

        return getattr(protocol, name)

    if name == "RouteTable":
        from wren.routing.table import RouteTable

        return RouteTable

    if name in ("WrenError", "ConfigurationError", "RouteSyntaxError", "HTTPError"):
        from wren import errors

        return getattr(errors, name)

    if name == "get_request":
        from wren.context import get_request

        return get_request

    msg = f"module 'wren' has no attribute {name!r}"
    raise AttributeError(msg)
