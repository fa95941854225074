"""Error pages: negotiated bodies for policy misses and failures.

The HTML page for a status comes from, in priority order: the configured
file, the bundled asset, an inline message. JSON bodies are
``{"error": "<Reason>"}`` and plain-text bodies are the bare reason.
"""

from __future__ import annotations

import json as json_module
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from wren.http.response import AnyResponse, Response
from wren.negotiation import dispatch

logger = logging.getLogger("wren.server")

REASONS: dict[int, str] = {
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
}

_INLINE: dict[int, str] = {
    403: "<h1>403 | Forbidden</h1>",
    404: "<h1>404 | File Not Found</h1>",
    500: "<h1>500 | Internal Server Error</h1>",
}


def _bundled(name: str) -> str | None:
    asset = resources.files("wren.assets").joinpath(name)
    if not asset.is_file():
        return None
    return asset.read_text(encoding="utf-8")


def load_page(configured: str | Path | None, asset_name: str, inline: str) -> tuple[str, str]:
    """Load one error page.

    Returns ``(html, source)`` where *source* is the configured path,
    ``"built-in"``, or ``"inline"``.
    """
    if configured is not None:
        path = Path(configured)
        if path.is_file():
            return path.read_text(encoding="utf-8"), str(path)

    bundled = _bundled(asset_name)
    if bundled is not None:
        return bundled, "built-in"

    return f'{inline}\nAsset "{asset_name}" is missing', "inline"


@dataclass(frozen=True, slots=True)
class ErrorPages:
    """HTML bodies for error statuses, loaded once at startup."""

    pages: tuple[tuple[int, str], ...] = ()

    @classmethod
    def load(
        cls,
        not_found_page: str | Path | None = None,
        error_page: str | Path | None = None,
    ) -> ErrorPages:
        """Load the 404 and 500 pages, logging where each came from."""
        not_found, nf_source = load_page(not_found_page, "404.html", _INLINE[404])
        error, err_source = load_page(error_page, "500.html", _INLINE[500])
        logger.info("Not Found page: %s", nf_source)
        logger.info("Error page: %s", err_source)
        return cls(pages=((404, not_found), (500, error)))

    def html(self, status: int) -> str:
        for code, page in self.pages:
            if code == status:
                return page
        return _INLINE.get(status, f"<h1>{status} | {reason(status)}</h1>")

    def response(self, status: int, accept: str | None) -> AnyResponse:
        """Negotiate the error body for *status*."""
        text = reason(status)
        return dispatch(
            accept,
            {
                "html": lambda: Response(self.html(status), status=status),
                "json": lambda: Response(
                    json_module.dumps({"error": text}),
                    status=status,
                    content_type="application/json; charset=utf-8",
                ),
                "text": lambda: Response(
                    text, status=status, content_type="text/plain; charset=utf-8"
                ),
            },
        )


def reason(status: int) -> str:
    """The reason phrase used in error bodies."""
    return REASONS.get(status, f"Error {status}")
