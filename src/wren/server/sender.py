"""ASGI response sending: translates wren response types to ASGI messages.

In-memory ``Response`` bodies go out in a single message. ``FileResponse``
bodies are streamed from disk in fixed-size chunks; the file is opened
before the response starts so an open failure can still become a 500.
"""

import logging
from typing import Any

import anyio
from anyio.abc import TaskGroup

from wren._internal.asgi import Receive, Send
from wren.http.response import FileResponse, Response

logger = logging.getLogger("wren.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(
    response: Response | FileResponse,
    content_length: int,
) -> list[tuple[bytes, bytes]]:
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    raw_headers.append((b"content-length", str(content_length).encode("latin-1")))
    return raw_headers


def _start(response: Response | FileResponse, content_length: int) -> dict[str, Any]:
    return {
        "type": "http.response.start",
        "status": response.status,
        "headers": _raw_headers(response, content_length),
    }


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a wren Response into ASGI send() calls.

    HEAD responses carry the headers (including the length) of the
    equivalent GET but no body.
    """
    body = response.body_bytes if _body_allowed(response.status) else b""

    await send(_start(response, len(body)))
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )


async def send_file_response(
    response: FileResponse,
    send: Send,
    receive: Receive,
    *,
    head: bool = False,
) -> None:
    """Stream a file body, stopping early if the client disconnects.

    Raises ``OSError`` only when the file cannot be opened, before
    anything has been sent. Errors after the response has started are
    logged and the body is abandoned.
    """
    if head or not _body_allowed(response.status):
        await send(_start(response, response.size))
        await send({"type": "http.response.body", "body": b""})
        return

    file = await anyio.open_file(response.path, "rb")
    async with file:
        await send(_start(response, response.size))
        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(_watch_disconnect, receive, tg)
                await _stream(file, response, send)
                tg.cancel_scope.cancel()
        except Exception:
            logger.exception("Aborted streaming %s", response.path)


async def _watch_disconnect(receive: Receive, tg: TaskGroup) -> None:
    """Cancel the stream when the client goes away."""
    while True:
        message = await receive()
        if message.get("type") == "http.disconnect":
            logger.debug("Client disconnected mid-stream")
            tg.cancel_scope.cancel()
            return


async def _stream(file: anyio.AsyncFile[bytes], response: FileResponse, send: Send) -> None:
    remaining = response.size
    while remaining > 0:
        chunk = await file.read(min(response.chunk_size, remaining))
        if not chunk:
            # File shrank since it was stat'ed
            msg = f"{response.path} ended {remaining} bytes early"
            raise OSError(msg)
        remaining -= len(chunk)
        await send(
            {
                "type": "http.response.body",
                "body": chunk,
                "more_body": True,
            }
        )

    await send(
        {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }
    )
