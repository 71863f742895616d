"""Source text helpers shared by the SFC splitter and the template parser."""

import re
from bisect import bisect_right
from typing import List, Optional

from tree_sitter import Node

from vue_html_bridge.compiler.ast_nodes import Position, SourceLocation

INTERPOLATION_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)

# Characters that the HTML grammar treats as markup. Inside {{ }} they are
# swapped for a same-width neutral character before parsing.
_MARKUP_CHARS = str.maketrans({"<": "_", ">": "_", "&": "_"})

START = Position(line=1, column=1, offset=0)


def mask_interpolations(text: str) -> str:
    """Neutralize markup characters inside ``{{ }}`` without moving anything."""

    def repl(m: re.Match) -> str:
        return m.group(0).translate(_MARKUP_CHARS)

    return INTERPOLATION_RE.sub(repl, text)


class SourceText:
    """Maps tree-sitter byte offsets to character positions.

    ``origin`` is where this text starts inside the enclosing document, so
    positions come out in document coordinates.
    """

    def __init__(self, text: str, origin: Position = START) -> None:
        self.text = text
        self.data = text.encode("utf-8")
        self.origin = origin
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(text) if ch == "\n"]
        self._byte_to_char: Optional[List[int]] = None
        if len(self.data) != len(text):
            table: List[int] = []
            for index, ch in enumerate(text):
                table.extend([index] * len(ch.encode("utf-8")))
            table.append(len(text))
            self._byte_to_char = table

    def char_offset(self, byte_offset: int) -> int:
        if self._byte_to_char is None:
            return byte_offset
        return self._byte_to_char[byte_offset]

    def position(self, char_offset: int) -> Position:
        line_index = bisect_right(self._line_starts, char_offset) - 1
        column = char_offset - self._line_starts[line_index]
        if line_index == 0:
            column += self.origin.column - 1
        return Position(
            line=self.origin.line + line_index,
            column=column + 1,
            offset=self.origin.offset + char_offset,
        )

    def slice(self, start_byte: int, end_byte: int) -> str:
        return self.text[self.char_offset(start_byte) : self.char_offset(end_byte)]

    def location(self, start: int, end: int) -> SourceLocation:
        """Location of the character range ``[start, end)``."""
        return SourceLocation(
            start=self.position(start),
            end=self.position(end),
            source=self.text[start:end],
        )

    def node_text(self, node: Node) -> str:
        return self.slice(node.start_byte, node.end_byte)

    def node_location(self, node: Node) -> SourceLocation:
        return self.location(
            self.char_offset(node.start_byte), self.char_offset(node.end_byte)
        )

    def node_position(self, node: Node) -> Position:
        return self.position(self.char_offset(node.start_byte))


def first_error(node: Node) -> Optional[Node]:
    """Return the first ERROR, missing or stray end-tag node under ``node``."""
    if node.type in ("ERROR", "erroneous_end_tag") or node.is_missing:
        return node
    for child in node.children:
        found = first_error(child)
        if found is not None:
            return found
    return None
