"""Serve command: build the config from CLI flags and start the server."""

import argparse
import logging
import socket
import threading
import webbrowser

from wren.config import ServerConfig, StaticOptions

logger = logging.getLogger("wren.cli")

_PROBE_TIMEOUT = 0.5


def is_port_free(host: str, port: int) -> bool:
    """True if nothing accepts connections on *host*:*port*."""
    probe_host = "127.0.0.1" if host in ("", "0.0.0.0") else host
    try:
        with socket.create_connection((probe_host, port), timeout=_PROBE_TIMEOUT):
            return False
    except ConnectionRefusedError:
        return True


def find_free_port(host: str) -> int:
    """Let the OS pick an unused port on *host*."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed CLI flags into a ``ServerConfig``.

    Raises ``ConfigurationError`` for invalid values.
    """
    static = StaticOptions(
        dotfiles=args.dotfiles,
        etag=not args.no_etag,
        extensions=tuple(args.extensions or ()),
        max_age=args.max_age,
        redirect=not args.no_redirect,
    )
    return ServerConfig(
        root=args.root,
        host=args.host,
        port=args.port,
        debug=args.debug,
        log_level=args.log_level,
        open_browser=args.open,
        routes_file=args.routes,
        not_found_page=args.not_found_page,
        error_page=args.err_page,
        static=static,
    )


def run_server(args: argparse.Namespace) -> None:
    """Start serving ``args.root`` until interrupted."""
    from wren.app import App

    config = config_from_args(args)
    app = App(config)
    # Load the route file and pages now so a bad config fails before binding
    app._ensure_frozen()

    port = config.port
    if port == 0:
        port = find_free_port(config.host)
    elif not is_port_free(config.host, port):
        port = find_free_port(config.host)
        logger.warning("Port %d is already in use. Switching to free port %d.", config.port, port)

    url = f"http://localhost:{port}"
    logger.info("%s is listening. To stop press CTRL+C...", url)
    if config.open_browser:
        threading.Timer(0.5, webbrowser.open, args=(url,)).start()

    app.run(port=port)
