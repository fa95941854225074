"""Server and static-resolution configuration.

Both classes are frozen dataclasses, immutable after creation, validated
once in ``__post_init__``, shared read-only by every request.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from wren.errors import ConfigurationError

type DotfilePolicy = Literal["allow", "ignore", "deny"]

_DOTFILE_POLICIES = ("allow", "ignore", "deny")
_SEPARATORS = ("/", "\\")


@dataclass(frozen=True, slots=True)
class StaticOptions:
    """Options for static file resolution. Immutable after creation.

    Defaults follow a local development server::

        options = StaticOptions(extensions=("html", "htm"), max_age=60)

    ``extensions`` is an ordered tuple tried after an exact miss; an empty
    tuple disables extension fallback. ``index=None`` disables index
    substitution for directories.
    """

    dotfiles: DotfilePolicy = "ignore"
    etag: bool = True
    extensions: tuple[str, ...] = ()
    index: str | None = "index.html"
    max_age: int = 0
    redirect: bool = True
    fallthrough: bool = True

    def __post_init__(self) -> None:
        if self.dotfiles not in _DOTFILE_POLICIES:
            msg = (
                f"Invalid dotfiles policy {self.dotfiles!r}. "
                f"Expected one of: {', '.join(_DOTFILE_POLICIES)}."
            )
            raise ConfigurationError(msg)

        if isinstance(self.max_age, bool) or not isinstance(self.max_age, int) or self.max_age < 0:
            msg = f"max_age must be a non-negative integer, got {self.max_age!r}."
            raise ConfigurationError(msg)

        normalized: list[str] = []
        for ext in self.extensions:
            if not isinstance(ext, str):
                msg = f"File extensions must be strings, got {ext!r}."
                raise ConfigurationError(msg)
            ext = ext.removeprefix(".")
            if not ext:
                msg = "File extensions must not be empty."
                raise ConfigurationError(msg)
            if any(sep in ext for sep in _SEPARATORS):
                msg = f"File extension {ext!r} must not contain a path separator."
                raise ConfigurationError(msg)
            normalized.append(ext)
        object.__setattr__(self, "extensions", tuple(normalized))

        if self.index is not None:
            if not self.index or any(sep in self.index for sep in _SEPARATORS):
                msg = f"Index file name {self.index!r} must be a plain file name."
                raise ConfigurationError(msg)

    @property
    def cache_control(self) -> str:
        """The ``Cache-Control`` header value for served files."""
        return f"public, max-age={self.max_age}"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Process-level configuration, usually built by the CLI.

    Page paths are resolved at startup by :mod:`wren.pages`; a missing
    file falls back to the bundled asset.
    """

    root: str | Path = "."
    host: str = "127.0.0.1"
    port: int = 80
    debug: bool = False
    log_level: str = "info"

    # Browser
    open_browser: bool = False

    # Route rules and error pages (paths relative to the working directory)
    routes_file: str | Path | None = "./.routes"
    not_found_page: str | Path | None = "./.404.html"
    error_page: str | Path | None = "./.500.html"

    static: StaticOptions = field(default_factory=StaticOptions)

    def __post_init__(self) -> None:
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            msg = "Port must be an integer"
            raise ConfigurationError(msg)
        if not 0 <= self.port <= 65535:
            msg = "Port must be in range [0-65535]"
            raise ConfigurationError(msg)
