"""Route table: parses the route-rule text format.

One rule per line, ``#`` starts a comment, blank lines are ignored::

    [&|&&] <requirement-path> <op> <replacement>

``<op>`` is ``:``, ``=`` or ``:=`` for a rewrite and ``>`` for a redirect.
A leading ``&`` (or ``&&``) makes the requirement a case-insensitive,
start-anchored regular expression; the requirement must then end with
``/``. Without ``&`` the requirement is an exact string prefix.

Parsing happens once at startup. Any malformed line raises
``RouteSyntaxError`` naming the 1-based line number.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path

from wren.errors import ConfigurationError, RouteSyntaxError
from wren.routing.rule import Operation, PrefixRule, RegexRule, Rule

_LINE = re.compile(
    r"^(?P<qualifier>&{0,2})\s*"
    r"(?P<requirement>[/^]\S*?)\s*"
    r"(?P<op>:=|[:=>])\s*"
    r"(?P<replacement>\S*)$"
)

# Route files use $1, ${name}, $<name>, $& and $$ substitutions; these are
# rewritten into Python re template syntax.
_JS_TEMPLATE = re.compile(r"\$(?:(\d+)|\{(\w+)\}|<(\w+)>|(&)|(\$))")


def _convert_template(replacement: str) -> str:
    def sub(m: re.Match[str]) -> str:
        number, braced, angled, whole, dollar = m.groups()
        if number is not None:
            return rf"\g<{number}>"
        if braced is not None or angled is not None:
            return rf"\g<{braced or angled}>"
        if whole is not None:
            return r"\g<0>"
        return "$" if dollar else m.group(0)

    return _JS_TEMPLATE.sub(sub, replacement)


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0].strip()


def parse_route_line(line: str, line_number: int) -> Rule | None:
    """Parse one line of the route file.

    Returns ``None`` for blank and comment-only lines.

    Raises:
        RouteSyntaxError: If the line does not match the grammar, a plain
            rule does not start with ``/``, or a ``&`` rule does not end
            with ``/``.
    """
    text = _strip_comment(line)
    if not text:
        return None

    m = _LINE.match(text)
    if m is None:
        raise RouteSyntaxError(line_number, text)

    qualifier = m["qualifier"]
    requirement = m["requirement"]
    replacement = m["replacement"]
    operation = Operation.REDIRECT if m["op"] == ">" else Operation.REWRITE

    if not qualifier:
        if not requirement.startswith("/"):
            raise RouteSyntaxError(line_number, text)
        return PrefixRule(
            prefix=requirement,
            replacement=replacement,
            operation=operation,
            line_number=line_number,
        )

    if not requirement.endswith("/"):
        raise RouteSyntaxError(line_number, text)

    body = requirement[:-1]
    source = body if body.startswith("^") else f"^{body}"
    try:
        pattern = re.compile(f"{source}(?=/|$)", re.IGNORECASE)
    except re.error as exc:
        raise RouteSyntaxError(line_number, text) from exc

    # The requirement's trailing slash is not part of the match, so drop
    # the replacement's as well: "&/api/ : /v2/" maps /api/x to /v2/x.
    if replacement.endswith("/") and len(replacement) > 1:
        replacement = replacement[:-1]

    return RegexRule(
        pattern=pattern,
        replacement=_convert_template(replacement),
        operation=operation,
        line_number=line_number,
    )


class RouteTable:
    """An ordered, immutable list of compiled route rules.

    Usage::

        table = RouteTable.parse("/old/ > /new/\\n&/api/ : /v2/\\n")
        len(table)  # 2
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: tuple[Rule, ...] = ()) -> None:
        self._rules = rules

    @classmethod
    def parse(cls, source: str) -> RouteTable:
        """Parse route text into a table, preserving file order."""
        rules: list[Rule] = []
        for index, line in enumerate(source.splitlines()):
            rule = parse_route_line(line, index + 1)
            if rule is not None:
                rules.append(rule)
        return cls(tuple(rules))

    @classmethod
    def from_file(cls, path: str | Path | None) -> RouteTable:
        """Load a route file. A missing or unset path yields an empty table."""
        if path is None:
            return cls()
        route_path = Path(path)
        if not route_path.is_file():
            return cls()
        try:
            source = route_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read route file {str(route_path)!r}: {exc}"
            raise ConfigurationError(msg) from exc
        return cls.parse(source)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)
