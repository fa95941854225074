"""Route engine: first-match rewriting over a RouteTable."""

import logging
import re

from wren.routing.rule import Operation, RouteResult
from wren.routing.table import RouteTable

logger = logging.getLogger("wren.routing")

_TRAILING_SLASHES = re.compile(r"/{2,}$")


class RouteEngine:
    """Apply route rules to request paths.

    Rules are tried in file order and the first match wins; there is no
    longest-match or priority reordering. Unmatched paths pass through
    unchanged and are never redirects.

    The engine holds no per-request state and is shared by all requests.
    """

    __slots__ = ("_table",)

    def __init__(self, table: RouteTable | None = None) -> None:
        self._table = table if table is not None else RouteTable()

    @property
    def table(self) -> RouteTable:
        return self._table

    def resolve(self, path: str) -> RouteResult:
        """Resolve *path* to a rewritten path or a redirect instruction."""
        for rule in self._table:
            rewritten = rule.apply(path)
            if rewritten is None:
                continue
            rewritten = _TRAILING_SLASHES.sub("/", rewritten)
            redirect = rule.operation is Operation.REDIRECT
            logger.debug(
                "route line %d: %s -> %s%s",
                rule.line_number,
                path,
                rewritten,
                " (redirect)" if redirect else "",
            )
            return RouteResult(path=rewritten, redirect=redirect, rule=rule)
        return RouteResult(path=path)
