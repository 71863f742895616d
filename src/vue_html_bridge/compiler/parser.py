"""Vue template parser.

Turns template markup into the position-annotated node tree consumed by the
segment grouper and the renderer. Markup structure comes from the
tree-sitter HTML grammar; text runs between child nodes are read back from
the source so that interpolations, entities and spacing survive intact.
"""

import re
from typing import List, Optional

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from vue_html_bridge.compiler.ast_nodes import (
    VOID_ELEMENTS,
    AttributeNode,
    CommentNode,
    DirectiveNode,
    ElementNode,
    InterpolationNode,
    Position,
    Prop,
    SourceLocation,
    TemplateNode,
    TextNode,
)
from vue_html_bridge.compiler.exceptions import BridgeSyntaxError
from vue_html_bridge.compiler.source import (
    INTERPOLATION_RE,
    START,
    SourceText,
    first_error,
    mask_interpolations,
)

_WHITESPACE_RE = re.compile(r"\s+")

# Same shape as Vue's own attribute-name grammar:
# v-name:arg.mod1.mod2, :arg, .arg, @arg, #arg, with [expr] dynamic args.
_DIRECTIVE_PREFIX_RE = re.compile(r"^(v-[A-Za-z0-9-]|:|\.|@|#)")
_DIRECTIVE_RE = re.compile(
    r"(?:^v-([a-z0-9-]+))?(?:(?::|^\.|^@|^#)(\[[^\]]+\]|[^.]+))?(.+)?$",
    re.IGNORECASE,
)

_ELEMENT_TYPES = ("element", "script_element", "style_element")
_RAW_TEXT_TYPES = ("script_element", "style_element")


class TemplateParser:
    """Parses Vue template markup."""

    def __init__(self) -> None:
        self._parser = get_parser("html")
        self._file_path: Optional[str] = None

    def parse(
        self, content: str, origin: Position = START, file_path: str = ""
    ) -> List[TemplateNode]:
        """Parse template markup starting at ``origin`` in the document."""
        self._file_path = file_path or None
        source = SourceText(content, origin)
        tree = self._parser.parse(mask_interpolations(content).encode("utf-8"))
        root = tree.root_node

        error = first_error(root)
        if error is not None:
            pos = source.node_position(error)
            raise BridgeSyntaxError(
                self._describe_error(error, source),
                file_path=self._file_path,
                line=pos.line,
                column=pos.column,
            )

        return self._map_children(root, 0, len(source.data), source)

    def _describe_error(self, node: Node, source: SourceText) -> str:
        if node.type == "erroneous_end_tag":
            return f"Invalid end tag {source.node_text(node)!r}"
        if node.is_missing:
            return f"Missing {node.type!r}"
        snippet = source.node_text(node).strip().splitlines()
        return f"Unexpected markup {snippet[0][:40]!r}" if snippet else "Unexpected markup"

    def _map_children(
        self, parent: Node, start_byte: int, end_byte: int, source: SourceText
    ) -> List[TemplateNode]:
        nodes: List[TemplateNode] = []
        cursor = start_byte
        for child in parent.named_children:
            if child.type not in _ELEMENT_TYPES + ("comment", "doctype"):
                continue
            nodes.extend(self._parse_text(source, cursor, child.start_byte))
            mapped = self._map_node(child, source)
            if mapped is not None:
                nodes.append(mapped)
            cursor = child.end_byte
        nodes.extend(self._parse_text(source, cursor, end_byte))
        return nodes

    def _map_node(self, node: Node, source: SourceText) -> Optional[TemplateNode]:
        if node.type == "doctype":
            return None
        if node.type == "comment":
            text = source.node_text(node)
            return CommentNode(loc=source.node_location(node), content=text[4:-3])
        return self._map_element(node, source)

    def _map_element(self, node: Node, source: SourceText) -> ElementNode:
        start_tag = None
        end_tag = None
        for child in node.children:
            if child.type in ("start_tag", "self_closing_tag"):
                start_tag = child
            elif child.type == "end_tag":
                end_tag = child
        if start_tag is None:
            pos = source.node_position(node)
            raise BridgeSyntaxError(
                "Element without a start tag",
                file_path=self._file_path,
                line=pos.line,
                column=pos.column,
            )

        tag = ""
        props: List[Prop] = []
        for child in start_tag.named_children:
            if child.type == "tag_name":
                tag = source.node_text(child)
            elif child.type == "attribute":
                props.append(self._parse_attribute(child, source))

        is_self_closing = start_tag.type == "self_closing_tag"
        if end_tag is not None:
            end_byte = end_tag.end_byte
        elif is_self_closing or tag.lower() in VOID_ELEMENTS:
            end_byte = start_tag.end_byte
        else:
            pos = source.node_position(node)
            raise BridgeSyntaxError(
                f"Element <{tag}> is missing end tag",
                file_path=self._file_path,
                line=pos.line,
                column=pos.column,
            )

        # Without an end tag the grammar node runs on to the next sibling.
        element = ElementNode(
            loc=source.location(
                source.char_offset(node.start_byte), source.char_offset(end_byte)
            ),
            tag=tag,
            props=props,
            is_self_closing=is_self_closing,
        )
        if end_tag is None:
            return element

        content_end = end_tag.start_byte
        if node.type in _RAW_TEXT_TYPES:
            raw = source.slice(start_tag.end_byte, content_end)
            if raw.strip():
                start = source.char_offset(start_tag.end_byte)
                element.children.append(
                    TextNode(loc=source.location(start, start + len(raw)), content=raw)
                )
        else:
            element.children = self._map_children(
                node, start_tag.end_byte, content_end, source
            )
        return element

    def _parse_attribute(self, node: Node, source: SourceText) -> Prop:
        name = ""
        value: Optional[str] = None
        for child in node.named_children:
            if child.type == "attribute_name":
                name = source.node_text(child)
            elif child.type == "attribute_value":
                value = source.node_text(child)
            elif child.type == "quoted_attribute_value":
                value = source.node_text(child)[1:-1]

        loc = source.node_location(node)
        directive = self._parse_directive(name, value, loc)
        if directive is not None:
            return directive
        return AttributeNode(name=name, value=value, loc=loc)

    def _parse_directive(
        self, name: str, value: Optional[str], loc: SourceLocation
    ) -> Optional[DirectiveNode]:
        if not _DIRECTIVE_PREFIX_RE.match(name):
            return None
        match = _DIRECTIVE_RE.match(name)
        if not match:
            return None

        dir_name = match.group(1)
        if not dir_name:
            if name.startswith(":") or name.startswith("."):
                dir_name = "bind"
            elif name.startswith("@"):
                dir_name = "on"
            else:
                dir_name = "slot"

        arg = match.group(2)
        arg_is_static = True
        if arg and arg.startswith("["):
            arg = arg[1:-1]
            arg_is_static = False

        modifiers = match.group(3)[1:].split(".") if match.group(3) else []
        if name.startswith(".") and "prop" not in modifiers:
            modifiers.append("prop")

        return DirectiveNode(
            name=dir_name,
            raw_name=name,
            loc=loc,
            arg=arg,
            arg_is_static=arg_is_static,
            modifiers=modifiers,
            exp=value,
        )

    def _parse_text(
        self, source: SourceText, start_byte: int, end_byte: int
    ) -> List[TemplateNode]:
        """Split a text run into text and interpolation nodes."""
        if end_byte <= start_byte:
            return []
        start = source.char_offset(start_byte)
        text = source.text[start : source.char_offset(end_byte)]

        nodes: List[TemplateNode] = []
        pos = 0
        for m in INTERPOLATION_RE.finditer(text):
            nodes.extend(self._text_node(source, start + pos, text[pos : m.start()]))
            nodes.append(
                InterpolationNode(
                    loc=source.location(start + m.start(), start + m.end()),
                    expression=m.group(1).strip(),
                )
            )
            pos = m.end()
        nodes.extend(self._text_node(source, start + pos, text[pos:]))
        return nodes

    def _text_node(self, source: SourceText, start: int, raw: str) -> List[TemplateNode]:
        if not raw.strip():
            return []
        content = _WHITESPACE_RE.sub(" ", raw)
        return [TextNode(loc=source.location(start, start + len(raw)), content=content)]
