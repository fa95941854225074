"""Wren exception hierarchy.

Shared across routing, resolution, middleware, and the ASGI handler so
every module raises and catches the same types.

Policy misses (dotfile deny/ignore, file not found) are *not* exceptions:
the resolver returns an explicit ``Miss`` result. Only configuration
problems and HTTP errors raised by user middleware live here.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when server or static options are invalid.

    Always fatal at startup: the server must not begin serving.
    """


class RouteSyntaxError(ConfigurationError):
    """A line of the route file does not match the rule grammar.

    Carries the 1-based line number and the raw line text so the CLI
    can point at the offending rule.
    """

    def __init__(self, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"Malformed route at line {line_number}:\n{line}")


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Middleware may raise these to abort the chain; the ASGI handler
    renders them as negotiated error pages.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class Forbidden(HTTPError):  # noqa: N818
    """403: the path is refused by policy."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing on disk answers the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
