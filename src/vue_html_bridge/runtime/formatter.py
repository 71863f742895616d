"""Whitespace-insensitive HTML pretty printer.

Elements that fit in the remaining width print on one line. Otherwise their
children go on separate, indented lines, and an open tag that is still too
long puts one attribute per line. Markup structure comes from the
tree-sitter HTML grammar; attribute and text content are copied from the
input, so position attributes survive formatting exactly.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from vue_html_bridge.compiler.ast_nodes import VOID_ELEMENTS
from vue_html_bridge.compiler.source import SourceText

log = logging.getLogger(__name__)

# Same-width stand-ins for "<" and "&" that cannot start markup, so that
# text such as "1 < 2" or "Tom & Jerry" parses as text.
_STRAY_MARKUP_RE = re.compile(r"<(?![A-Za-z/!])|&(?!#?[A-Za-z0-9]+;)")
_WHITESPACE_RE = re.compile(r"\s+")

_ELEMENT_TYPES = ("element", "script_element", "style_element")
RAW_TEXT_ELEMENTS = frozenset({"script", "style", "textarea", "pre"})

_parser: Optional[Parser] = None


def _html_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = get_parser("html")
    return _parser


def mask_stray_markup(html: str) -> str:
    return _STRAY_MARKUP_RE.sub("_", html)


def _contains_element(node: Node) -> bool:
    return any(
        child.type in _ELEMENT_TYPES or _contains_element(child) for child in node.children
    )


class FormatError(Exception):
    """Raised when markup does not form a well-nested element tree."""


@dataclass
class _Element:
    tag: str
    attrs: List[str] = field(default_factory=list)
    children: List["_Node"] = field(default_factory=list)
    self_closing: bool = False

    @property
    def is_void(self) -> bool:
        return self.tag.lower() in VOID_ELEMENTS


@dataclass
class _Text:
    text: str


@dataclass
class _Comment:
    text: str


_Node = Union[_Element, _Text, _Comment]


class HtmlFormatter:
    def __init__(self, print_width: int = 80, indent_width: int = 2):
        self.print_width = print_width
        self.indent_width = indent_width

    def format(self, html: str) -> str:
        lines: List[str] = []
        for node in self.parse(html):
            lines.extend(self._print(node, 0))
        return "\n".join(lines)

    def parse(self, html: str) -> List[_Node]:
        source = SourceText(html)
        tree = _html_parser().parse(mask_stray_markup(html).encode("utf-8"))
        root = _Element(tag="")
        self._fill(root, tree.root_node, 0, len(source.data), source)
        return root.children

    def _fill(
        self, parent: _Element, node: Node, start_byte: int, end_byte: int, source: SourceText
    ) -> None:
        """Add the children of ``node`` between two byte offsets to ``parent``.

        Text is whatever lies between child elements and comments, read back
        from the input.
        """
        cursor = start_byte
        for child in node.named_children:
            if child.type == "erroneous_end_tag":
                raise FormatError(f"Unexpected closing tag {source.node_text(child)!r}")
            if child.type == "ERROR" and _contains_element(child):
                raise FormatError(f"Unreadable markup at offset {child.start_byte}")
            if child.type not in _ELEMENT_TYPES and child.type != "comment":
                continue
            self._add_text(parent, source.slice(cursor, child.start_byte))
            if child.type == "comment":
                parent.children.append(_Comment(text=source.node_text(child)))
                cursor = child.end_byte
            else:
                element, cursor = self._element(child, source)
                parent.children.append(element)
        self._add_text(parent, source.slice(cursor, end_byte))

    def _element(self, node: Node, source: SourceText) -> Tuple[_Element, int]:
        """Map an element node; returns it with the offset where it really ends."""
        start_tag = None
        end_tag = None
        for child in node.children:
            if child.type in ("start_tag", "self_closing_tag"):
                start_tag = child
            elif child.type == "end_tag":
                end_tag = child
        if start_tag is None:
            raise FormatError(f"Element without a start tag at offset {node.start_byte}")

        element = _Element(tag="", self_closing=start_tag.type == "self_closing_tag")
        for child in start_tag.named_children:
            if child.type == "tag_name":
                element.tag = source.node_text(child)
            elif child.type == "attribute":
                element.attrs.append(source.node_text(child))

        if end_tag is None:
            if not (element.self_closing or element.is_void):
                raise FormatError(f"Unclosed element <{element.tag}>")
            return element, start_tag.end_byte

        if node.type != "element" or element.tag.lower() in RAW_TEXT_ELEMENTS:
            raw = source.slice(start_tag.end_byte, end_tag.start_byte).strip()
            if raw:
                element.children.append(_Text(text=raw))
        else:
            self._fill(element, node, start_tag.end_byte, end_tag.start_byte, source)
        return element, end_tag.end_byte

    def _add_text(self, parent: _Element, text: str) -> None:
        text = _WHITESPACE_RE.sub(" ", text).strip()
        if text:
            parent.children.append(_Text(text=text))

    def _open_tag(self, element: _Element) -> str:
        end = " />" if element.self_closing else ">"
        if not element.attrs:
            return f"<{element.tag}{end}"
        return f"<{element.tag} {' '.join(element.attrs)}{end}"

    def _flat(self, node: _Node) -> str:
        if not isinstance(node, _Element):
            return node.text
        open_tag = self._open_tag(node)
        if node.self_closing or node.is_void:
            return open_tag
        children = "".join(self._flat(child) for child in node.children)
        return f"{open_tag}{children}</{node.tag}>"

    def _print(self, node: _Node, depth: int) -> List[str]:
        indent = " " * (self.indent_width * depth)
        flat = self._flat(node)
        if not isinstance(node, _Element) or len(indent) + len(flat) <= self.print_width:
            return [indent + flat]

        open_tag = self._open_tag(node)
        if len(indent) + len(open_tag) <= self.print_width or not node.attrs:
            lines = [indent + open_tag]
        else:
            attr_indent = indent + " " * self.indent_width
            lines = [f"{indent}<{node.tag}"]
            lines.extend(attr_indent + attr for attr in node.attrs)
            lines.append(indent + ("/>" if node.self_closing else ">"))

        if node.self_closing or node.is_void:
            return lines
        if not node.children:
            lines[-1] += f"</{node.tag}>"
            return lines
        for child in node.children:
            lines.extend(self._print(child, depth + 1))
        lines.append(f"{indent}</{node.tag}>")
        return lines


def format_html(html: str, print_width: int = 80, indent_width: int = 2) -> str:
    """Pretty-print ``html``; markup the printer cannot read is returned as-is."""
    if not html.strip():
        return html
    try:
        return HtmlFormatter(print_width, indent_width).format(html)
    except FormatError as e:
        log.debug("Formatting skipped: %s", e)
        return html
