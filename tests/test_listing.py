"""Tests for wren.listing: enumeration, size formatting and renderers."""

import json
from datetime import UTC, datetime

import pytest

from wren.listing import (
    ListingEntry,
    format_size,
    list_directory,
    listing_response,
    render_html,
    render_json,
    render_text,
)

MOMENT = datetime(2024, 5, 17, 8, 30, 0, 123000, tzinfo=UTC)


def entry(name: str, size: int = 0, *, is_dir: bool = False) -> ListingEntry:
    return ListingEntry(name=name, size=size, ctime=MOMENT, mtime=MOMENT, is_dir=is_dir)


@pytest.fixture
def listed_dir(tmp_path):
    (tmp_path / "b.txt").write_text("bbbb")
    (tmp_path / "a.txt").write_text("")
    (tmp_path / ".hidden").write_text("secret")
    (tmp_path / ".git").mkdir()
    (tmp_path / "sub").mkdir()
    return tmp_path


class TestFormatSize:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0.0 B"),
            (512, "512.0 B"),
            (1023, "1023.0 B"),
            (1024, "1.0 KiB"),
            (1536, "1.5 KiB"),
            (1535, "1.4 KiB"),
            (1024**2, "1.0 MiB"),
            (5 * 1024**3, "5.0 GiB"),
        ],
    )
    def test_binary_units(self, size: int, expected: str) -> None:
        assert format_size(size) == expected


class TestListDirectory:
    async def test_excludes_dotfiles(self, listed_dir) -> None:
        entries = await list_directory(listed_dir)
        names = [e.name for e in entries]
        assert ".hidden" not in names
        assert ".git" not in names

    async def test_sorted_by_name(self, listed_dir) -> None:
        entries = await list_directory(listed_dir)
        assert [e.name for e in entries] == ["a.txt", "b.txt", "sub"]

    async def test_stats_entries(self, listed_dir) -> None:
        entries = {e.name: e for e in await list_directory(listed_dir)}
        assert entries["b.txt"].size == 4
        assert entries["b.txt"].is_dir is False
        assert entries["sub"].is_dir is True
        assert entries["sub"].display_name == "sub/"

    async def test_dangling_symlink_is_listed(self, listed_dir) -> None:
        (listed_dir / "broken").symlink_to(listed_dir / "gone")
        entries = await list_directory(listed_dir)
        assert "broken" in [e.name for e in entries]


class TestRenderers:
    def test_json(self) -> None:
        data = json.loads(render_json([entry("a.txt", 3), entry("sub", 4096, is_dir=True)]))
        assert data == [
            {
                "name": "a.txt",
                "size": 3,
                "ctime": "2024-05-17T08:30:00.123Z",
                "mtime": "2024-05-17T08:30:00.123Z",
            },
            {
                "name": "sub/",
                "size": 4096,
                "ctime": "2024-05-17T08:30:00.123Z",
                "mtime": "2024-05-17T08:30:00.123Z",
            },
        ]

    def test_text(self) -> None:
        assert render_text([entry("a.txt"), entry("sub", is_dir=True)]) == "a.txt,sub/"

    def test_html_table(self) -> None:
        html = render_html([entry("a.txt", 1536)], "/docs/")
        assert "<th>Name</th><th>Date modified</th><th>Size</th>" in html
        assert '<a href="./a.txt">a.txt</a>' in html
        assert "1.5 KiB" in html

    def test_html_parent_row(self) -> None:
        assert '<a href="..">..</a>' in render_html([], "/docs/")
        assert '<a href="..">..</a>' in render_html([], "/docs/api/")

    def test_html_links_are_relative(self) -> None:
        html = render_html([entry("sub", is_dir=True)], "/public/docs/")
        assert '<a href="./sub/">sub/</a>' in html
        assert "/public/" not in html.split("</title>")[1]

    def test_html_links_without_trailing_slash(self) -> None:
        html = render_html([entry("a.txt", 1)], "/docs")
        assert 'href="./docs/a.txt"' in html

    def test_html_no_parent_row_at_root(self) -> None:
        assert ">..</a>" not in render_html([entry("a.txt")], "/")

    def test_html_zero_size_cell_omitted(self) -> None:
        html = render_html([entry("empty.txt", 0)], "/")
        assert "0.0 B" not in html

    def test_html_escapes_names(self) -> None:
        html = render_html([entry("<b>.txt", 1)], "/")
        assert "<b>.txt" not in html
        assert "&lt;b&gt;.txt" in html

    def test_html_quotes_hrefs(self) -> None:
        html = render_html([entry("a b.txt", 1)], "/")
        assert 'href="./a%20b.txt"' in html


class TestListingResponse:
    def test_default_is_html(self) -> None:
        response = listing_response([entry("a.txt")], "/", None)
        assert response.status == 200
        assert "text/html" in response.content_type

    def test_json(self) -> None:
        response = listing_response([entry("a.txt")], "/", "application/json")
        assert "application/json" in response.content_type
        assert response.json()[0]["name"] == "a.txt"

    def test_text(self) -> None:
        response = listing_response([entry("a.txt"), entry("b")], "/", "text/plain")
        assert response.text == "a.txt,b"

    def test_unsupported(self) -> None:
        response = listing_response([], "/", "image/png")
        assert response.status == 406
        assert response.json()["types"] == ["html", "json", "text"]
