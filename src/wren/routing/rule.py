"""Compiled route rules and the result of applying them.

Two tagged variants, chosen at parse time:

    PrefixRule  ``/old/ > /new/``      exact, case-sensitive prefix
    RegexRule   ``&/api/ : /v2/``      case-insensitive, start-anchored regex
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class Operation(Enum):
    """What a matching rule does with the rewritten path."""

    REWRITE = "rewrite"
    REDIRECT = "redirect"


@dataclass(frozen=True, slots=True)
class PrefixRule:
    """Replace a literal path prefix."""

    prefix: str
    replacement: str
    operation: Operation
    line_number: int = 0

    def apply(self, path: str) -> str | None:
        """Return the rewritten path, or ``None`` if the prefix doesn't match."""
        if not path.startswith(self.prefix):
            return None
        return self.replacement + path[len(self.prefix) :]


@dataclass(frozen=True, slots=True)
class RegexRule:
    """Substitute a start-anchored regular expression.

    ``pattern`` is compiled without the requirement's trailing ``/`` and
    must end on a segment boundary, so ``&/api/`` matches ``/API`` and
    ``/api/x`` but not ``/apiary``. This is deliberately narrower than a
    bare start-anchored prefix, which would also rewrite ``/apiary``.
    """

    pattern: re.Pattern[str]
    replacement: str
    operation: Operation
    line_number: int = 0

    def apply(self, path: str) -> str | None:
        """Return the substituted path, or ``None`` if the pattern doesn't match."""
        match = self.pattern.match(path)
        if match is None:
            return None
        rewritten = match.expand(self.replacement) + path[match.end() :]
        return rewritten or "/"


type Rule = PrefixRule | RegexRule


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Outcome of route resolution for one request path."""

    path: str
    redirect: bool = False
    rule: Rule | None = None

    @property
    def matched(self) -> bool:
        """True if a rule rewrote the path."""
        return self.rule is not None
