"""Script block compiler.

Parses ``<script setup>`` content with the tree-sitter TypeScript grammar and
classifies every top-level binding the way Vue's own script compiler does.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from vue_html_bridge.compiler.exceptions import ScriptCompileError
from vue_html_bridge.compiler.source import SourceText, first_error


class BindingType(str, Enum):
    PROPS = "props"
    SETUP_REACTIVE_CONST = "setup-reactive-const"
    SETUP_LET = "setup-let"
    LITERAL_CONST = "literal-const"
    SETUP_REF = "setup-ref"
    SETUP_CONST = "setup-const"
    SETUP_MAYBE_REF = "setup-maybe-ref"


REACTIVE_CALLS = ("defineProps", "withDefaults", "reactive")
REF_CALLS = ("ref", "computed", "shallowRef", "toRef", "customRef")

_WRAPPER_TYPES = (
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
    "type_assertion",
)
_LITERAL_TYPES = ("string", "number", "true", "false", "null")
_CONST_TYPES = (
    "array",
    "object",
    "arrow_function",
    "function_expression",
    "function",
    "class",
)


@dataclass
class CompiledScript:
    source: SourceText
    root: Node
    statements: List[Node] = field(default_factory=list)
    bindings: Dict[str, BindingType] = field(default_factory=dict)

    def text_of(self, node: Node) -> str:
        return self.source.node_text(node)


class PropsMacro(NamedTuple):
    """A ``defineProps`` call, with the ``withDefaults`` object when wrapped."""

    call: Node
    defaults: Optional[Node]


_parser: Optional[Parser] = None


def _ts_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = get_parser("typescript")
    return _parser


def compile_script(content: str) -> CompiledScript:
    """Parse script content and collect its top-level bindings.

    Raises:
        ScriptCompileError: the script has syntax errors.
    """
    source = SourceText(content)
    tree = _ts_parser().parse(source.data)
    root = tree.root_node

    if root.has_error:
        error = first_error(root) or root
        pos = source.node_position(error)
        raise ScriptCompileError(
            "Invalid script syntax", line=pos.line, column=pos.column
        )

    script = CompiledScript(
        source=source,
        root=root,
        statements=[n for n in root.named_children if n.type != "comment"],
    )
    for stmt in script.statements:
        _register_bindings(script, stmt)
    return script


def unwrap_expression(node: Optional[Node]) -> Optional[Node]:
    """Strip parentheses and TypeScript assertions around an expression."""
    while node is not None and node.type in _WRAPPER_TYPES and node.named_children:
        node = node.named_children[0]
    return node


def call_name(script: CompiledScript, node: Node) -> Optional[str]:
    """Callee name of ``foo(...)``, or None for anything else."""
    node = unwrap_expression(node)
    if node is None or node.type != "call_expression":
        return None
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "identifier":
        return None
    return script.text_of(callee)


def call_arguments(node: Node) -> List[Node]:
    args = node.child_by_field_name("arguments")
    if args is None:
        return []
    return [a for a in args.named_children if a.type != "comment"]


def call_type_argument(node: Node) -> Optional[Node]:
    """First type argument of ``foo<T>(...)``."""
    type_args = node.child_by_field_name("type_arguments")
    if type_args is None:
        return None
    for child in type_args.named_children:
        if child.type != "comment":
            return child
    return None


def find_define_props_call(script: CompiledScript, node: Node) -> Optional[PropsMacro]:
    """Recognise ``defineProps<T>()`` and ``withDefaults(defineProps<T>(), {...})``."""
    node = unwrap_expression(node)
    name = call_name(script, node)
    if name == "defineProps":
        return PropsMacro(call=node, defaults=None)
    if name == "withDefaults":
        args = call_arguments(node)
        if args and call_name(script, args[0]) == "defineProps":
            defaults = unwrap_expression(args[1]) if len(args) > 1 else None
            if defaults is not None and defaults.type != "object":
                defaults = None
            return PropsMacro(call=unwrap_expression(args[0]), defaults=defaults)
    return None


def _register_bindings(script: CompiledScript, stmt: Node) -> None:
    if stmt.type == "export_statement":
        declaration = stmt.child_by_field_name("declaration")
        if declaration is not None:
            _register_bindings(script, declaration)
        return

    if stmt.type == "import_statement":
        for name in _import_names(script, stmt):
            script.bindings[name] = BindingType.SETUP_MAYBE_REF
        return

    if stmt.type in ("lexical_declaration", "variable_declaration"):
        is_const = stmt.children[0].type == "const"
        for decl in stmt.named_children:
            if decl.type == "variable_declarator":
                _register_declarator(script, decl, is_const)
        return

    if stmt.type in (
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
        "enum_declaration",
    ):
        name = stmt.child_by_field_name("name")
        if name is not None:
            script.bindings[script.text_of(name)] = BindingType.SETUP_CONST


def _register_declarator(script: CompiledScript, decl: Node, is_const: bool) -> None:
    target = decl.child_by_field_name("name")
    value = decl.child_by_field_name("value")
    if target is None:
        return

    if target.type in ("object_pattern", "array_pattern"):
        is_props = value is not None and find_define_props_call(script, value) is not None
        for name in _pattern_names(script, target):
            if is_props:
                script.bindings[name] = BindingType.PROPS
            elif is_const:
                script.bindings[name] = BindingType.SETUP_MAYBE_REF
            else:
                script.bindings[name] = BindingType.SETUP_LET
        return

    name = script.text_of(target)
    if not is_const:
        script.bindings[name] = BindingType.SETUP_LET
        return
    script.bindings[name] = _classify_const(script, value)


def _classify_const(script: CompiledScript, value: Optional[Node]) -> BindingType:
    value = unwrap_expression(value)
    if value is None:
        return BindingType.SETUP_MAYBE_REF

    callee = call_name(script, value)
    if callee in REACTIVE_CALLS:
        return BindingType.SETUP_REACTIVE_CONST
    if callee in REF_CALLS:
        return BindingType.SETUP_REF

    if value.type in _LITERAL_TYPES:
        return BindingType.LITERAL_CONST
    if value.type == "template_string" and not any(
        c.type == "template_substitution" for c in value.named_children
    ):
        return BindingType.LITERAL_CONST
    if value.type in _CONST_TYPES:
        return BindingType.SETUP_CONST
    return BindingType.SETUP_MAYBE_REF


def _pattern_names(script: CompiledScript, pattern: Node) -> List[str]:
    names: List[str] = []
    for child in pattern.named_children:
        if child.type in ("identifier", "shorthand_property_identifier_pattern"):
            names.append(script.text_of(child))
        elif child.type == "object_assignment_pattern":
            left = child.child_by_field_name("left")
            if left is not None:
                names.extend(_pattern_names_of(script, left))
        elif child.type == "pair_pattern":
            value = child.child_by_field_name("value")
            if value is not None:
                names.extend(_pattern_names_of(script, value))
        elif child.type == "assignment_pattern":
            names.extend(_pattern_names_of(script, child))
        elif child.type == "rest_pattern":
            names.extend(_pattern_names(script, child))
        elif child.type in ("object_pattern", "array_pattern"):
            names.extend(_pattern_names(script, child))
    return names


def _pattern_names_of(script: CompiledScript, node: Node) -> List[str]:
    if node.type in ("identifier", "shorthand_property_identifier_pattern"):
        return [script.text_of(node)]
    if node.type == "assignment_pattern":
        left = node.child_by_field_name("left")
        return _pattern_names_of(script, left) if left is not None else []
    return _pattern_names(script, node)


def _import_names(script: CompiledScript, stmt: Node) -> List[str]:
    names: List[str] = []
    for clause in stmt.named_children:
        if clause.type != "import_clause":
            continue
        for part in clause.named_children:
            if part.type == "identifier":
                names.append(script.text_of(part))
            elif part.type == "namespace_import":
                for ident in part.named_children:
                    if ident.type == "identifier":
                        names.append(script.text_of(ident))
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    local = spec.child_by_field_name("alias") or spec.child_by_field_name(
                        "name"
                    )
                    if local is not None:
                        names.append(script.text_of(local))
    return names
