"""Filesystem path resolution for static requests.

Maps a request path onto the served root and decides what answers it.
Resolution order (first success wins):

1. Dotfile policy, checked before touching the filesystem.
2. Exact file.
3. Exact directory: trailing-slash redirect, then index file, else the
   directory itself (listing).
4. Extension fallback: ``<path>.<ext>`` in configured order.
5. Not found.

Policy outcomes are returned as ``Miss`` values. Unexpected filesystem
errors (permission denied, I/O failures) propagate to the caller.
"""

import errno
import os
import stat as stat_module
from dataclasses import dataclass
from pathlib import Path

import anyio

from wren.config import StaticOptions

# errnos meaning "nothing is there" rather than "something went wrong"
_ABSENT = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ENAMETOOLONG, errno.ELOOP})


@dataclass(frozen=True, slots=True)
class FileTarget:
    """A regular file to serve."""

    path: Path
    stat: os.stat_result

    @property
    def size(self) -> int:
        return self.stat.st_size

    @property
    def mtime(self) -> float:
        return self.stat.st_mtime


@dataclass(frozen=True, slots=True)
class DirectoryTarget:
    """A directory with no index file to substitute; answered with a listing."""

    path: Path


@dataclass(frozen=True, slots=True)
class SlashRedirect:
    """A directory requested without its trailing slash."""

    location: str


@dataclass(frozen=True, slots=True)
class Miss:
    """A deliberate policy outcome: forbidden or not found."""

    status: int
    reason: str


FORBIDDEN = Miss(403, "Forbidden")
NOT_FOUND = Miss(404, "Not Found")

type ResolvedTarget = FileTarget | DirectoryTarget | SlashRedirect | Miss


def has_dotfile_segment(path: str) -> bool:
    """True if any segment of *path* starts with ``.``."""
    return any(segment.startswith(".") for segment in path.split("/"))


async def _stat(path: anyio.Path) -> os.stat_result | None:
    """Stat *path*, or ``None`` if no such file can exist there.

    Embedded NUL bytes and over-long names come from the request, not the
    filesystem, and are treated like a missing file.
    """
    try:
        return await path.stat()
    except ValueError:
        return None
    except OSError as exc:
        if exc.errno in _ABSENT:
            return None
        raise


async def _resolve(path: anyio.Path) -> anyio.Path | None:
    try:
        return await path.resolve()
    except ValueError:
        return None
    except OSError as exc:
        if exc.errno in _ABSENT:
            return None
        raise


class PathResolver:
    """Resolve request paths against one root directory.

    Stateless apart from the resolved root; safe to share between
    concurrent requests.
    """

    __slots__ = ("_root",)

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    async def resolve(self, request_path: str, options: StaticOptions) -> ResolvedTarget:
        """Determine the filesystem target for *request_path*."""
        if has_dotfile_segment(request_path):
            if options.dotfiles == "deny":
                return FORBIDDEN
            if options.dotfiles == "ignore":
                return NOT_FOUND

        relative = request_path.lstrip("/")
        candidate = anyio.Path(self._root)
        if relative:
            resolved = await _resolve(anyio.Path(self._root / relative))
            if resolved is None:
                return NOT_FOUND
            candidate = resolved
        if not self._contains(candidate):
            return FORBIDDEN

        st = await _stat(candidate)
        if st is not None:
            if stat_module.S_ISREG(st.st_mode):
                return FileTarget(Path(candidate), st)
            if stat_module.S_ISDIR(st.st_mode):
                return await self._resolve_directory(candidate, request_path, options)
            return NOT_FOUND

        if options.extensions and not request_path.endswith("/"):
            for ext in options.extensions:
                fallback = anyio.Path(f"{candidate}.{ext}")
                st = await _stat(fallback)
                if st is not None and stat_module.S_ISREG(st.st_mode):
                    if not await self._links_inside(fallback):
                        return FORBIDDEN
                    return FileTarget(Path(fallback), st)

        return NOT_FOUND

    def _contains(self, path: anyio.Path) -> bool:
        return Path(path).is_relative_to(self._root)

    async def _links_inside(self, path: anyio.Path) -> bool:
        """True if *path*, with symlinks followed, stays under the root."""
        resolved = await _resolve(path)
        return resolved is not None and self._contains(resolved)

    async def _resolve_directory(
        self,
        directory: anyio.Path,
        request_path: str,
        options: StaticOptions,
    ) -> ResolvedTarget:
        if options.redirect and not request_path.endswith("/"):
            return SlashRedirect(request_path + "/")

        if options.index:
            index_path = directory / options.index
            st = await _stat(index_path)
            if st is not None and stat_module.S_ISREG(st.st_mode):
                if not await self._links_inside(index_path):
                    return FORBIDDEN
                return FileTarget(Path(index_path), st)

        return DirectoryTarget(Path(directory))
