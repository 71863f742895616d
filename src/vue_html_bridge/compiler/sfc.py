"""Single-file component splitter."""

import logging
from typing import Dict, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from vue_html_bridge.compiler.ast_nodes import SFCBlock, SFCDescriptor
from vue_html_bridge.compiler.exceptions import BridgeSyntaxError
from vue_html_bridge.compiler.source import SourceText, mask_interpolations

log = logging.getLogger(__name__)

_parser: Optional[Parser] = None


def _html_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = get_parser("html")
    return _parser


def parse_sfc(source: str, file_path: str = "") -> SFCDescriptor:
    """Split a component into its top-level blocks.

    Only top-level elements count as blocks. Block content keeps the
    position where it starts in the document so that template nodes can be
    reported in document coordinates.
    """
    text = SourceText(source)
    tree = _html_parser().parse(mask_interpolations(source).encode("utf-8"))
    descriptor = SFCDescriptor(file_path=file_path)

    for node in tree.root_node.named_children:
        if node.type not in ("element", "script_element", "style_element"):
            continue
        block = _read_block(node, text)
        if block is None:
            continue

        if block.type == "template":
            if descriptor.template is not None:
                raise BridgeSyntaxError(
                    "Single file component can contain only one <template> element",
                    file_path=file_path or None,
                    line=block.origin.line,
                )
            if block.lang and block.lang != "html":
                log.warning(
                    "Skipping <template lang=%r> in %s: only HTML templates are supported",
                    block.lang,
                    file_path or "<string>",
                )
                continue
            descriptor.template = block
        elif block.type == "script":
            if "setup" in block.attrs:
                descriptor.script_setup = block
            else:
                descriptor.script = block
        elif block.type == "style":
            descriptor.styles.append(block)

    return descriptor


def _read_block(node: Node, text: SourceText) -> Optional[SFCBlock]:
    start_tag = None
    end_tag = None
    for child in node.children:
        if child.type == "start_tag":
            start_tag = child
        elif child.type == "end_tag":
            end_tag = child
    if start_tag is None:
        return None

    tag = ""
    attrs: Dict[str, Optional[str]] = {}
    for child in start_tag.named_children:
        if child.type == "tag_name":
            tag = text.node_text(child).lower()
        elif child.type == "attribute":
            name = ""
            value: Optional[str] = None
            for part in child.named_children:
                if part.type == "attribute_name":
                    name = text.node_text(part)
                elif part.type == "attribute_value":
                    value = text.node_text(part)
                elif part.type == "quoted_attribute_value":
                    value = text.node_text(part)[1:-1]
            attrs[name] = value

    if tag not in ("template", "script", "style"):
        return None

    content_start = start_tag.end_byte
    content_end = end_tag.start_byte if end_tag is not None else node.end_byte
    return SFCBlock(
        type=tag,
        content=text.slice(content_start, content_end),
        origin=text.position(text.char_offset(content_start)),
        attrs=attrs,
    )
