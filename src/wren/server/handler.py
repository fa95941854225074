"""ASGI handler: translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, runs the pipeline, and sends the response
back through ASGI send().
"""

from contextvars import Token

from wren._internal.asgi import Receive, Scope, Send
from wren.context import request_var, status_var
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import AnyResponse, FileResponse
from wren.middleware.protocol import Next
from wren.pages import ErrorPages
from wren.server.errors import handle_http_error, handle_internal_error
from wren.server.sender import send_file_response, send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    handler: Next,
    pages: ErrorPages,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    # Set request context vars (reset after dispatch)
    token: Token[Request] = request_var.set(request)
    status_token: Token[int | None] = status_var.set(None)

    response: AnyResponse
    try:
        response = await handler(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, pages)
    except Exception as exc:
        response = handle_internal_error(exc, request, pages, debug)
    finally:
        status_var.reset(status_token)
        request_var.reset(token)

    if isinstance(response, FileResponse):
        try:
            await send_file_response(response, send, receive, head=request.is_head)
        except OSError as exc:
            # Opening failed; nothing has been sent yet
            response = handle_internal_error(exc, request, pages, debug)
        else:
            return

    await send_response(response, send, head=request.is_head)
