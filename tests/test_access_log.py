"""Tests for wren.middleware.access_log."""

import logging
from datetime import UTC, datetime

import pytest

from wren.http.headers import Headers
from wren.http.request import Request
from wren.http.response import FileResponse, Response
from wren.middleware.access_log import AccessLog, format_access_line


def make_request(path: str = "/index.html", **headers: str) -> Request:
    return Request(
        method="GET",
        path=path,
        headers=Headers((k.replace("_", "-"), v) for k, v in headers.items()),
        client=("10.0.0.7", 51234),
    )


class TestFormatAccessLine:
    def test_format(self) -> None:
        request = make_request(referer="http://localhost/", user_agent="curl/8.5.0")
        moment = datetime(2024, 5, 17, 8, 30, 0, 123000, tzinfo=UTC)

        line = format_access_line(request, 200, Response("hello"), now=moment)

        assert line == (
            '[2024-05-17T08:30:00.123Z] 10.0.0.7 - - "GET /index.html HTTP/1.1" '
            '5 "http://localhost/" "curl/8.5.0" 200'
        )

    def test_missing_values_are_dashes(self) -> None:
        request = Request(method="GET", path="/", headers=Headers())
        line = format_access_line(request, 500)
        assert line.endswith('"GET / HTTP/1.1" - "-" "-" 500')
        assert "] - - -" in line

    def test_file_response_length_is_file_size(self, tmp_path) -> None:
        response = FileResponse(path=tmp_path / "f", size=1234)
        assert " 1234 " in format_access_line(make_request(), 200, response)


class TestAccessLog:
    async def test_logs_one_line(self, caplog) -> None:
        async def endpoint(request: Request) -> Response:
            return Response("ok")

        with caplog.at_level(logging.INFO, logger="wren.access"):
            await AccessLog()(make_request(), endpoint)

        records = [r for r in caplog.records if r.name == "wren.access"]
        assert len(records) == 1
        assert records[0].getMessage().endswith(" 200")

    async def test_observers(self) -> None:
        events: list[tuple] = []

        async def endpoint(request: Request) -> Response:
            return Response("missing", status=404)

        mw = AccessLog(
            on_start=lambda request: events.append(("start", request.path)),
            on_finish=lambda request, status: events.append(("finish", status)),
        )
        await mw(make_request("/x"), endpoint)

        assert events == [("start", "/x"), ("finish", 404)]

    async def test_failure_logged_as_500(self, caplog) -> None:
        async def endpoint(request: Request) -> Response:
            raise PermissionError("denied")

        with caplog.at_level(logging.INFO, logger="wren.access"), pytest.raises(PermissionError):
            await AccessLog()(make_request(), endpoint)

        assert caplog.records[-1].getMessage().endswith(" 500")
