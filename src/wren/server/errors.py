"""Error handling for wren requests.

Maps HTTPError exceptions and unexpected failures to negotiated error
responses built from the loaded error pages.
"""

import logging
import traceback
from html import escape

from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import AnyResponse, Response
from wren.negotiation import Unsupported, negotiate
from wren.pages import ErrorPages, reason

logger = logging.getLogger("wren.server")


def handle_http_error(exc: HTTPError, request: Request, pages: ErrorPages) -> AnyResponse:
    """Map an HTTPError raised by a stage to a negotiated error page."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    response = pages.response(exc.status, request.accept)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(
    exc: Exception,
    request: Request,
    pages: ErrorPages,
    debug: bool,
) -> AnyResponse:
    """Handle unexpected exceptions as 500 errors.

    A client that accepts none of the error representations still gets
    the plain-text reason; a failure is never answered with 406.
    """
    logger.exception("500 %s %s", request.method, request.path)

    if debug:
        trace = escape("".join(traceback.format_exception(exc)))
        return Response(body=f"<h1>500 | {reason(500)}</h1>\n<pre>{trace}</pre>", status=500)

    if isinstance(negotiate(request.accept, ("html", "json", "text")), Unsupported):
        return Response(reason(500), status=500, content_type="text/plain; charset=utf-8")
    return pages.response(500, request.accept)
