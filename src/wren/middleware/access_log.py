"""Access logging middleware.

Writes one line per request to the ``wren.access`` logger::

    [2026-10-18T09:12:03.512Z] 127.0.0.1 - - "GET /docs/ HTTP/1.1" 1834 "-" "curl/8.5.0" 200

Anything that wants to track in-flight requests (a terminal status
display, metrics) subscribes through the ``on_start`` / ``on_finish``
callbacks; the middleware itself keeps no registry.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from wren.http.request import Request
from wren.http.response import AnyResponse, FileResponse, Response
from wren.middleware.protocol import Next

access_logger = logging.getLogger("wren.access")

type StartCallback = Callable[[Request], None]
type FinishCallback = Callable[[Request, int], None]


def _content_length(response: AnyResponse | None) -> str:
    match response:
        case FileResponse(size=size):
            return str(size)
        case Response():
            return str(len(response.body_bytes))
        case _:
            return "-"


def format_access_line(
    request: Request,
    status: int,
    response: AnyResponse | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """Format one access log line."""
    moment = (now or datetime.now(UTC)).isoformat(timespec="milliseconds")
    host = request.client[0] if request.client else "-"
    referer = request.headers.get("referer") or "-"
    agent = request.headers.get("user-agent") or "-"
    return (
        f"[{moment.replace('+00:00', 'Z')}] {host} - - "
        f'"{request.method} {request.path} HTTP/{request.http_version}" '
        f'{_content_length(response)} "{referer}" "{agent}" {status}'
    )


class AccessLog:
    """Middleware that logs every request after it has been answered.

    Requests that raise are logged with status 500 before the exception
    continues to the error handler.
    """

    __slots__ = ("_logger", "_on_finish", "_on_start")

    def __init__(
        self,
        *,
        logger: logging.Logger | None = None,
        on_start: StartCallback | None = None,
        on_finish: FinishCallback | None = None,
    ) -> None:
        self._logger = logger or access_logger
        self._on_start = on_start
        self._on_finish = on_finish

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        if self._on_start is not None:
            self._on_start(request)

        status = 500
        response: AnyResponse | None = None
        try:
            response = await next(request)
            status = response.status
            return response
        finally:
            self._logger.info("%s", format_access_line(request, status, response))
            if self._on_finish is not None:
                self._on_finish(request, status)
