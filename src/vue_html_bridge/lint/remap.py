"""Mapping positions in annotated HTML back to the component source."""

import re
from typing import NamedTuple, Optional

ATTRIBUTE_NAME_RE = re.compile(r"^([a-zA-Z0-9-:]+)(?:=|$)")


class MappedLocation(NamedTuple):
    line: int
    col: int


def _offset(html: str, line: int, col: int) -> int:
    lines = re.split(r"\r?\n", html)
    offset = 0
    for text in lines[: max(line - 1, 0)]:
        offset += len(text) + 1
    return offset + col - 1


def _read_span(tag: str, prefix: str) -> Optional[MappedLocation]:
    line = re.search(rf'(?:^|\s){re.escape(prefix)}start-line="(\d+)"', tag)
    col = re.search(rf'(?:^|\s){re.escape(prefix)}start-column="(\d+)"', tag)
    if line is None or col is None:
        return None
    return MappedLocation(int(line.group(1)), int(col.group(1)))


def map_location(html: str, line: int, col: int, raw: str = "") -> MappedLocation:
    """Translate a 1-based ``line``/``col`` in annotated HTML to source coordinates.

    The nearest tag at or before the position supplies the element's source
    start. When ``raw`` names an attribute that carries its own span, that
    span wins. Positions without annotation data come back unchanged.
    """
    reported = MappedLocation(line, col)
    if line < 1 or col < 1:
        return reported

    index = _offset(html, line, col)
    if index >= len(html):
        return reported

    tag_start = html.rfind("<", 0, index + 1)
    if tag_start == -1:
        return reported
    tag_end = html.find(">", tag_start)
    if tag_end == -1:
        return reported
    tag = html[tag_start : tag_end + 1]

    element = _read_span(tag, "data-")
    if element is None:
        return reported

    match = ATTRIBUTE_NAME_RE.match(raw or "")
    if match:
        attribute = _read_span(tag, f"data-{match.group(1)}-")
        if attribute is not None:
            return attribute
    return element
