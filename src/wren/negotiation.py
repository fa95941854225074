"""Content negotiation: picks a representation key from the Accept header.

Call sites offer an ordered set of representation keys (``html``,
``json``, ``text``) and a render function per key. The negotiator
returns the key the client prefers most; equal preferences resolve to
the earliest key the call site offered, not the client's order.
Explicit, tagged dispatch::

    response = dispatch(request.accept, {
        "html": lambda: Response(page),
        "json": lambda: Response(json_body, content_type="application/json"),
        "text": lambda: Response(reason, content_type="text/plain"),
    })
"""

import json as json_module
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from wren.http.response import AnyResponse, Response

# Representation key -> media type
MEDIA_TYPES: dict[str, str] = {
    "html": "text/html",
    "json": "application/json",
    "text": "text/plain",
}


@dataclass(frozen=True, slots=True)
class MediaRange:
    """One entry of an Accept header, e.g. ``text/*;q=0.5``."""

    type: str
    subtype: str
    q: float = 1.0
    index: int = 0

    def specificity(self, media_type: str) -> int:
        """How specifically this range matches *media_type* (-1 = no match)."""
        main, _, sub = media_type.partition("/")
        if self.type == "*":
            return 0 if self.subtype == "*" else -1
        if self.type != main:
            return -1
        if self.subtype == "*":
            return 1
        return 2 if self.subtype == sub else -1


@dataclass(frozen=True, slots=True)
class Unsupported:
    """No offered representation satisfies the client.

    ``types`` lists the keys that were offered.
    """

    types: tuple[str, ...]

    def body(self) -> dict[str, object]:
        """Machine-readable 406 body."""
        return {
            "code": "UnsupportedType",
            "message": "Not Acceptable",
            "types": list(self.types),
        }


def _parse_q(params: Iterable[str]) -> float | None:
    for param in params:
        name, _, value = param.partition("=")
        if name.strip().lower() != "q":
            continue
        try:
            q = float(value.strip())
        except ValueError:
            return None
        return q if 0.0 <= q <= 1.0 else None
    return 1.0


def parse_accept(header: str | None) -> list[MediaRange]:
    """Parse an Accept header. A missing or blank header accepts anything.

    Malformed entries are skipped.
    """
    if header is None or not header.strip():
        return [MediaRange("*", "*")]

    ranges: list[MediaRange] = []
    for index, part in enumerate(header.split(",")):
        media, *params = part.split(";")
        media = media.strip().lower()
        if media == "*":
            media = "*/*"
        main, sep, sub = media.partition("/")
        if not sep or not main or not sub:
            continue
        q = _parse_q(params)
        if q is None:
            continue
        ranges.append(MediaRange(main, sub, q, index))
    return ranges


def _media_type(key: str) -> str:
    return key if "/" in key else MEDIA_TYPES.get(key, key)


def quality(ranges: Sequence[MediaRange], media_type: str) -> float:
    """The client's quality for *media_type*, from its most specific range."""
    best: tuple[int, float, int] | None = None
    for r in ranges:
        score = r.specificity(media_type)
        if score < 0:
            continue
        candidate = (score, r.q, -r.index)
        if best is None or candidate > best:
            best = candidate
    return best[1] if best is not None else 0.0


def negotiate(accept: str | None, available: Sequence[str]) -> str | Unsupported:
    """Choose the best representation key for an Accept header.

    Keys are representation names from ``MEDIA_TYPES`` or full media
    types. Returns ``Unsupported`` when every offered key has quality 0.
    """
    ranges = parse_accept(accept)
    chosen: str | None = None
    chosen_q = 0.0
    for key in available:
        q = quality(ranges, _media_type(key))
        if q > chosen_q:
            chosen, chosen_q = key, q
    if chosen is None:
        return Unsupported(tuple(available))
    return chosen


def not_acceptable(outcome: Unsupported) -> Response:
    """The 406 response for a failed negotiation."""
    return Response(
        body=json_module.dumps(outcome.body()),
        status=406,
        content_type="application/json; charset=utf-8",
    )


def dispatch(
    accept: str | None,
    renderers: Mapping[str, Callable[[], AnyResponse]],
) -> AnyResponse:
    """Negotiate over *renderers* (in their insertion order) and call the winner."""
    choice = negotiate(accept, tuple(renderers))
    if isinstance(choice, Unsupported):
        return not_acceptable(choice)
    return renderers[choice]()
