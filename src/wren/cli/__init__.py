"""Wren CLI: serve a directory, or scaffold its config files.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"
"""

import argparse
import logging
import sys

from wren.errors import ConfigurationError

logger = logging.getLogger("wren.cli")

_EPILOG = (
    'Start a URL path with "//" to force a directory listing instead of the '
    'index.html fallback, e.g. "http://localhost//docs/".'
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wren",
        description="Wren: a local static file server.",
        epilog=_EPILOG,
    )
    parser.add_argument("root", nargs="?", default=".", help="Directory to serve (default: .)")
    parser.add_argument("-p", "--port", type=int, default=80, help="Server port (default: 80)")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host address")
    parser.add_argument("-o", "--open", action="store_true", help="Open in browser")
    parser.add_argument(
        "-i",
        "--init",
        action="store_true",
        help="Write .500.html, .404.html and .routes into the root and exit",
    )
    parser.add_argument(
        "-x",
        "--extensions",
        nargs="*",
        default=["html", "htm"],
        help="Extensions tried, in order, when a file is not found (default: html htm)",
    )
    parser.add_argument(
        "-e",
        "--err-page",
        default="./.500.html",
        help="Internal Server Error page. Priority: arg > ./.500.html > built-in",
    )
    parser.add_argument(
        "-n",
        "--not-found-page",
        default="./.404.html",
        help="Not Found page. Priority: arg > ./.404.html > built-in",
    )
    parser.add_argument(
        "-r",
        "--routes",
        default="./.routes",
        help="Path to the route rules file (default: ./.routes)",
    )
    parser.add_argument(
        "--dotfiles",
        choices=("allow", "ignore", "deny"),
        default="ignore",
        help="How to answer paths with a dot-prefixed segment (default: ignore)",
    )
    parser.add_argument(
        "--max-age",
        type=int,
        default=0,
        help="Cache-Control max-age in seconds (default: 0)",
    )
    parser.add_argument("--no-etag", action="store_true", help="Disable ETag and 304 responses")
    parser.add_argument(
        "--no-redirect",
        action="store_true",
        help="Don't redirect directories to their trailing-slash path",
    )
    parser.add_argument(
        "--log-level",
        choices=("debug", "info", "warning", "error"),
        default="info",
        help="Logging level (default: info)",
    )
    parser.add_argument("--debug", action="store_true", help="Show tracebacks on 500 pages")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.init:
            from wren.cli._init import init_project

            init_project(args.root)
            return

        from wren.cli._run import run_server

        run_server(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
