"""HTML rendering of permuted template nodes."""

from typing import Dict, List, Optional

from vue_html_bridge.compiler.ast_nodes import (
    VOID_ELEMENTS,
    AttributeNode,
    CommentNode,
    DirectiveNode,
    ElementNode,
    InterpolationNode,
    SourceLocation,
    TextNode,
)
from vue_html_bridge.core.permutation import PermutedNode
from vue_html_bridge.core.values import RenderContext, js_string

UNRESOLVED = "{{unresolved}}"


def resolve_value(
    key: Optional[str], context: RenderContext, loop_context: Dict[str, str]
) -> str:
    """Resolve an expression: loop bindings, then the render context."""
    if not key:
        return UNRESOLVED
    key = key.strip()
    if key in loop_context:
        return loop_context[key]
    if key in context:
        return js_string(context[key])
    return UNRESOLVED


def _span_attrs(prefix: str, loc: SourceLocation) -> List[str]:
    return [
        f'{prefix}start-line="{loc.start.line}"',
        f'{prefix}start-column="{loc.start.column}"',
        f'{prefix}end-line="{loc.end.line}"',
        f'{prefix}end-column="{loc.end.column}"',
    ]


class AnnotatedRenderer:
    """Serializes one scenario to HTML.

    With ``annotate`` set, each element and each rendered attribute is
    followed by ``data-*`` attributes holding its template source span.
    """

    def __init__(self, context: RenderContext, annotate: bool = False):
        self.context = context
        self.annotate = annotate

    def render(self, nodes: List[PermutedNode]) -> str:
        return "".join(self._render_node(pn, {}) for pn in nodes)

    def _render_node(self, pn: PermutedNode, loop_context: Dict[str, str]) -> str:
        node = pn.node
        if pn.loop_context:
            loop_context = {**loop_context, **pn.loop_context}

        if isinstance(node, TextNode):
            return node.content.strip()
        if isinstance(node, CommentNode):
            return ""
        if isinstance(node, InterpolationNode):
            return resolve_value(node.expression, self.context, loop_context)
        if not isinstance(node, ElementNode):
            return ""

        attrs = self._render_attributes(node, loop_context)
        open_tag = f"<{node.tag} {' '.join(attrs)}>" if attrs else f"<{node.tag}>"
        if node.tag.lower() in VOID_ELEMENTS:
            return open_tag

        children = "".join(self._render_node(child, loop_context) for child in pn.children or [])
        return f"{open_tag}{children}</{node.tag}>"

    def _render_attributes(self, node: ElementNode, loop_context: Dict[str, str]) -> List[str]:
        attrs: List[str] = []
        if self.annotate:
            attrs.extend(_span_attrs("data-", node.loc))

        for prop in node.props:
            if isinstance(prop, AttributeNode):
                name = prop.name
                value = prop.value or ""
            elif (
                isinstance(prop, DirectiveNode)
                and prop.name == "bind"
                and prop.arg
                and prop.arg_is_static
            ):
                name = prop.arg
                value = resolve_value(prop.exp, self.context, loop_context)
            else:
                continue

            attrs.append(f'{name}="{value}"')
            if self.annotate:
                attrs.extend(_span_attrs(f"data-{name}-", prop.loc))
        return attrs


def render_nodes(
    nodes: List[PermutedNode], context: RenderContext, annotate: bool = False
) -> str:
    return AnnotatedRenderer(context, annotate).render(nodes)
