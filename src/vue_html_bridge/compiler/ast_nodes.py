"""Template and SFC node types.

Template nodes form a closed set: ElementNode, TextNode, CommentNode and
InterpolationNode. Consumers dispatch on them with isinstance and treat the
tree as read-only.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

# Elements that never have content or an end tag.
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


@dataclass(frozen=True)
class Position:
    """A point in the component source. Line and column are 1-based."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True)
class SourceLocation:
    """Span of a node. ``end`` points just past the last character."""

    start: Position
    end: Position
    source: str = ""


@dataclass
class AttributeNode:
    """Static attribute, e.g. ``class="root"`` or a bare ``disabled``."""

    name: str
    value: Optional[str]
    loc: SourceLocation


@dataclass
class DirectiveNode:
    """Vue directive, e.g. ``v-if="x"``, ``:class="theme"``, ``@click="go"``.

    ``name`` is the directive name without prefix (``if``, ``bind``, ``on``),
    ``raw_name`` the attribute name as written.
    """

    name: str
    raw_name: str
    loc: SourceLocation
    arg: Optional[str] = None
    arg_is_static: bool = True
    modifiers: List[str] = field(default_factory=list)
    exp: Optional[str] = None


Prop = Union[AttributeNode, DirectiveNode]


@dataclass
class TemplateNode:
    loc: SourceLocation


@dataclass
class ElementNode(TemplateNode):
    tag: str
    props: List[Prop] = field(default_factory=list)
    children: List[TemplateNode] = field(default_factory=list)
    is_self_closing: bool = False

    def find_directive(self, name: str) -> Optional[DirectiveNode]:
        for prop in self.props:
            if isinstance(prop, DirectiveNode) and prop.name == name:
                return prop
        return None

    def has_directive(self, name: str) -> bool:
        return self.find_directive(name) is not None


@dataclass
class TextNode(TemplateNode):
    content: str


@dataclass
class CommentNode(TemplateNode):
    content: str


@dataclass
class InterpolationNode(TemplateNode):
    """``{{ expression }}``; ``expression`` is stored stripped."""

    expression: str


@dataclass
class SFCBlock:
    """One top-level block of a single-file component."""

    type: str
    content: str
    origin: Position
    attrs: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def lang(self) -> Optional[str]:
        return self.attrs.get("lang")


@dataclass
class SFCDescriptor:
    file_path: str = ""
    template: Optional[SFCBlock] = None
    script: Optional[SFCBlock] = None
    script_setup: Optional[SFCBlock] = None
    styles: List[SFCBlock] = field(default_factory=list)
