"""Tests for wren.mime."""

import pytest

from wren.mime import DEFAULT_TYPE, lookup


class TestLookup:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("index.html", "text/html"),
            ("style.css", "text/css"),
            ("app.js", "text/javascript"),
            ("module.mjs", "text/javascript"),
            ("data.json", "application/json"),
            ("font.woff2", "font/woff2"),
            ("IMAGE.PNG", "image/png"),
        ],
    )
    def test_known_types(self, path: str, expected: str) -> None:
        assert lookup(path) == expected

    def test_unknown_extension(self) -> None:
        assert lookup("blob.zzz-unknown") == DEFAULT_TYPE

    def test_no_extension(self) -> None:
        assert lookup("Makefile") == DEFAULT_TYPE
        assert lookup("LICENSE", fallback="text/plain") == "text/plain"
