"""Tests for wren.cache: ETag fingerprints and If-None-Match matching."""

import os
import re

from wren.cache import fingerprint, matches

ETAG_FORMAT = re.compile(r'^W/"[0-9a-f]+-[0-9a-f]+"$')


class TestFingerprint:
    def test_format(self, tmp_path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("hello")
        assert ETAG_FORMAT.match(fingerprint(os.stat(path)))

    def test_stable_for_unchanged_file(self, tmp_path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("hello")
        assert fingerprint(os.stat(path)) == fingerprint(os.stat(path))

    def test_changes_with_size(self, tmp_path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("hello")
        before = os.stat(path)
        path.write_text("hello, world")
        os.utime(path, ns=(before.st_atime_ns, before.st_mtime_ns))
        assert fingerprint(os.stat(path)) != fingerprint(before)

    def test_changes_with_mtime(self, tmp_path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("hello")
        before = os.stat(path)
        os.utime(path, (before.st_atime, before.st_mtime + 10))
        assert fingerprint(os.stat(path)) != fingerprint(before)


class TestMatches:
    def test_exact_match(self) -> None:
        assert matches('W/"5-1"', 'W/"5-1"')

    def test_missing_header(self) -> None:
        assert not matches('W/"5-1"', None)

    def test_different_tag(self) -> None:
        assert not matches('W/"5-1"', 'W/"5-2"')

    def test_no_weak_comparison(self) -> None:
        assert not matches('W/"5-1"', '"5-1"')
