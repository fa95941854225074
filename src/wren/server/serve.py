"""Run a wren App under pounce.

Pounce's ``run()`` takes an import string, but wren has a live ``App``
object, so ``pounce.Server`` is driven directly with the ASGI callable.
"""


def run_server(app: object, host: str, port: int, *, log_level: str = "info") -> None:
    """Start a single-worker pounce server for *app* and block until it stops."""
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=False,
        log_level=log_level,
    )
    Server(config, app).run()
