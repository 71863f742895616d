"""Grouping of template siblings into control-flow segments."""

import re
from dataclasses import dataclass
from typing import List, Optional, Union

from vue_html_bridge.compiler.ast_nodes import ElementNode, TemplateNode

FOR_RE = re.compile(r"(\w+)\s+(?:in|of)\s+(\w+|\[.*\])")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass(frozen=True)
class ImplicitElse:
    """The branch taken when no condition of an if-chain holds."""


IMPLICIT_ELSE = ImplicitElse()

Branch = Union[TemplateNode, ImplicitElse]


@dataclass
class StaticSegment:
    node: TemplateNode


@dataclass
class IfBlockSegment:
    branches: List[Branch]


@dataclass
class ShowBlockSegment:
    node: ElementNode


@dataclass
class ForBlockSegment:
    node: ElementNode
    iterator: str
    source: str
    inline_array: Optional[List[Union[str, int, float]]] = None


Segment = Union[StaticSegment, IfBlockSegment, ShowBlockSegment, ForBlockSegment]


def parse_inline_array(expr: str) -> List[Union[str, int, float]]:
    """Parse ``[1, 'a', b]`` from a ``v-for`` source.

    Parts are numbers when they read as one, quoted strings unquoted, and
    anything else kept as written. Empty parts are skipped.
    """
    inner = expr[1:-1].strip()
    if not inner:
        return []
    items: List[Union[str, int, float]] = []
    for part in inner.split(","):
        part = part.strip()
        if not part:
            continue
        if _NUMBER_RE.match(part):
            number = float(part)
            items.append(int(number) if number.is_integer() else number)
        elif len(part) >= 2 and part[0] == part[-1] and part[0] in "'\"":
            items.append(part[1:-1])
        else:
            items.append(part)
    return items


def group_segments(nodes: List[TemplateNode]) -> List[Segment]:
    """Partition one sibling list into segments, left to right."""
    segments: List[Segment] = []
    i = 0
    while i < len(nodes):
        node = nodes[i]
        if isinstance(node, ElementNode) and node.has_directive("if"):
            branches: List[Branch] = [node]
            i += 1
            while i < len(nodes):
                sibling = nodes[i]
                if not isinstance(sibling, ElementNode):
                    break
                if not (sibling.has_directive("else-if") or sibling.has_directive("else")):
                    break
                branches.append(sibling)
                i += 1
            last = branches[-1]
            if isinstance(last, ElementNode) and not last.has_directive("else"):
                branches.append(IMPLICIT_ELSE)
            segments.append(IfBlockSegment(branches=branches))
            continue

        if isinstance(node, ElementNode):
            segments.append(_element_segment(node))
        else:
            segments.append(StaticSegment(node=node))
        i += 1
    return segments


def _element_segment(node: ElementNode) -> Segment:
    if node.has_directive("show"):
        return ShowBlockSegment(node=node)

    directive = node.find_directive("for")
    if directive is None:
        return StaticSegment(node=node)

    match = FOR_RE.search(directive.exp or "")
    if not match:
        return StaticSegment(node=node)

    iterator, source = match.group(1), match.group(2)
    inline_array = None
    if source.startswith("[") and source.endswith("]"):
        inline_array = parse_inline_array(source)
    return ForBlockSegment(
        node=node, iterator=iterator, source=source, inline_array=inline_array
    )
