"""Tests for wren.negotiation: Accept parsing and representation choice."""

import pytest

from wren.http.response import Response
from wren.negotiation import (
    MediaRange,
    Unsupported,
    dispatch,
    negotiate,
    not_acceptable,
    parse_accept,
    quality,
)

KEYS = ("html", "json", "text")


class TestParseAccept:
    def test_missing_header_accepts_anything(self) -> None:
        assert parse_accept(None) == [MediaRange("*", "*")]
        assert parse_accept("  ") == [MediaRange("*", "*")]

    def test_q_values(self) -> None:
        ranges = parse_accept("text/html, application/json;q=0.5")
        assert [(r.type, r.subtype, r.q) for r in ranges] == [
            ("text", "html", 1.0),
            ("application", "json", 0.5),
        ]

    def test_malformed_entries_are_skipped(self) -> None:
        ranges = parse_accept("garbage, text/plain;q=abc, application/json")
        assert [(r.type, r.subtype) for r in ranges] == [("application", "json")]

    def test_quality_prefers_most_specific_range(self) -> None:
        ranges = parse_accept("text/*;q=0.3, text/html;q=0.8, */*;q=0.1")
        assert quality(ranges, "text/html") == 0.8
        assert quality(ranges, "text/plain") == 0.3
        assert quality(ranges, "application/json") == 0.1


class TestNegotiate:
    def test_no_header_picks_first_offered(self) -> None:
        assert negotiate(None, KEYS) == "html"

    def test_explicit_type(self) -> None:
        assert negotiate("application/json", KEYS) == "json"
        assert negotiate("text/plain", KEYS) == "text"

    def test_highest_quality_wins(self) -> None:
        assert negotiate("text/plain;q=0.5, application/json;q=0.9", KEYS) == "json"

    def test_ties_follow_server_order(self) -> None:
        assert negotiate("application/json, text/html", KEYS) == "html"
        assert negotiate("text/plain, application/json", ("json", "text")) == "json"

    def test_wildcard_subtype(self) -> None:
        assert negotiate("text/*", ("json", "text", "html")) == "text"

    def test_q_zero_excludes(self) -> None:
        assert negotiate("text/html;q=0, */*", KEYS) == "json"

    def test_full_media_type_keys(self) -> None:
        assert negotiate("image/png", ("image/png", "html")) == "image/png"

    def test_unsupported(self) -> None:
        outcome = negotiate("image/png", KEYS)
        assert isinstance(outcome, Unsupported)
        assert outcome.types == KEYS


class TestNotAcceptable:
    def test_body_lists_offered_types(self) -> None:
        response = not_acceptable(Unsupported(KEYS))
        assert response.status == 406
        assert "application/json" in response.content_type
        assert response.json() == {
            "code": "UnsupportedType",
            "message": "Not Acceptable",
            "types": ["html", "json", "text"],
        }


class TestDispatch:
    def test_only_the_winner_renders(self) -> None:
        calls: list[str] = []

        def render(key: str):
            def inner() -> Response:
                calls.append(key)
                return Response(key)

            return inner

        response = dispatch("application/json", {key: render(key) for key in KEYS})
        assert response.text == "json"
        assert calls == ["json"]

    def test_unsupported_is_406(self) -> None:
        response = dispatch("image/png", {"html": lambda: Response("x")})
        assert response.status == 406

    @pytest.mark.parametrize(
        ("accept", "expected"),
        [
            ("text/html", "html"),
            ("application/json", "json"),
            ("text/plain", "text"),
            ("*/*", "html"),
        ],
    )
    def test_dispatch_table(self, accept: str, expected: str) -> None:
        response = dispatch(accept, {key: (lambda k=key: Response(k)) for key in KEYS})
        assert response.text == expected
