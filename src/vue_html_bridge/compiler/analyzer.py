"""Value catalog builder.

Derives, for every prop and script variable a template can see, the finite
list of literal values it can take. Props come first, in declaration order,
then plain variables.

Domain priority for one name:

1. a literal, literal union or ``boolean`` type annotation
2. a destructuring default (``const { size = 'md' } = defineProps<...>()``)
3. a ``withDefaults`` default
4. a literal or literal-array initializer, looking through one ``ref(...)``
5. declared props only: the ``mock-<name>`` placeholder
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from tree_sitter import Node

from vue_html_bridge.compiler.exceptions import ScriptCompileError
from vue_html_bridge.compiler.script import (
    BindingType,
    CompiledScript,
    call_arguments,
    call_name,
    call_type_argument,
    compile_script,
    find_define_props_call,
    unwrap_expression,
)
from vue_html_bridge.core.values import Scalar, Value, ValueDefinitions, parse_number

log = logging.getLogger(__name__)

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


@dataclass
class ScriptAnalysis:
    definitions: ValueDefinitions = field(default_factory=dict)
    # Loop sources proven non-empty because they are bare array literals.
    static_arrays: Set[str] = field(default_factory=set)


def analyze_script(content: Optional[str]) -> ScriptAnalysis:
    """Build the value catalog for ``<script setup>`` content."""
    if not content or not content.strip():
        return ScriptAnalysis()

    try:
        script = compile_script(content)
    except ScriptCompileError as e:
        log.warning("Script analysis skipped: %s", e)
        return ScriptAnalysis()

    types = TypeDeclarationCollector(script)
    types.visit_program()

    analysis = ScriptAnalysis()
    PropsCollector(script, types.declarations, analysis).visit_program()
    VariableCollector(script, analysis, types.declarations).visit_program()
    log.debug(
        "Value catalog: %s",
        {name: len(values) for name, values in analysis.definitions.items()},
    )
    return analysis


# --- literal helpers --------------------------------------------------------


def string_value(script: CompiledScript, node: Node) -> str:
    parts: List[str] = []
    for child in node.named_children:
        text = script.text_of(child)
        if child.type == "escape_sequence":
            parts.append(_unescape(text))
        else:
            parts.append(text)
    return "".join(parts)


def _unescape(seq: str) -> str:
    body = seq[1:]
    if body in _ESCAPES:
        return _ESCAPES[body]
    if body.startswith("u{") and body.endswith("}"):
        return chr(int(body[2:-1], 16))
    if body.startswith(("u", "x")) and len(body) > 1:
        return chr(int(body[1:], 16))
    if body.startswith(("\r\n", "\n")):
        return ""
    return body


def literal_value(script: CompiledScript, node: Optional[Node]) -> Optional[Scalar]:
    """Value of a string, number or boolean literal; None for anything else."""
    node = unwrap_expression(node)
    if node is None:
        return None
    if node.type == "string":
        return string_value(script, node)
    if node.type == "template_string":
        if any(c.type == "template_substitution" for c in node.named_children):
            return None
        return script.text_of(node)[1:-1]
    if node.type == "number":
        return parse_number(script.text_of(node))
    if node.type == "true":
        return True
    if node.type == "false":
        return False
    if node.type == "unary_expression":
        operator = node.child_by_field_name("operator")
        argument = node.child_by_field_name("argument")
        if (
            operator is not None
            and argument is not None
            and argument.type == "number"
            and script.text_of(operator) in ("-", "+")
        ):
            number = parse_number(script.text_of(argument))
            return -number if script.text_of(operator) == "-" else number
    return None


def literal_array(script: CompiledScript, node: Optional[Node]) -> Optional[List[Any]]:
    """String and number elements of an array literal, or None if it has none."""
    node = unwrap_expression(node)
    if node is None or node.type != "array":
        return None
    items: List[Any] = []
    for element in node.named_children:
        value = literal_value(script, element)
        if value is None or isinstance(value, bool):
            continue
        items.append(value)
    return items or None


def type_domain(
    script: CompiledScript, node: Optional[Node], aliases: Optional[Dict[str, Node]] = None
) -> Optional[List[Value]]:
    """Values admitted by a literal, literal-union or ``boolean`` type."""
    values = _type_values(script, node, aliases or {}, set())
    return values or None


def _type_values(
    script: CompiledScript, node: Optional[Node], aliases: Dict[str, Node], seen: Set[str]
) -> List[Value]:
    if node is None:
        return []
    if node.type in ("type_annotation", "parenthesized_type"):
        inner = [c for c in node.named_children if c.type != "comment"]
        return _type_values(script, inner[0], aliases, seen) if inner else []
    if node.type == "predefined_type":
        return [True, False] if script.text_of(node) == "boolean" else []
    if node.type == "literal_type":
        inner = node.named_children
        value = literal_value(script, inner[0]) if inner else None
        return [] if value is None else [value]
    if node.type == "union_type":
        values: List[Value] = []
        for member in node.named_children:
            values.extend(_type_values(script, member, aliases, seen))
        return values
    if node.type == "type_identifier":
        name = script.text_of(node)
        alias = aliases.get(name)
        if alias is None or name in seen or alias.type in ("object_type", "interface_body"):
            return []
        return _type_values(script, alias, aliases, seen | {name})
    return []


# --- visitors -----------------------------------------------------------------


class ScriptVisitor:
    """Dispatches top-level statements to ``visit_<node type>`` methods."""

    def __init__(self, script: CompiledScript):
        self.script = script

    def visit_program(self) -> None:
        for stmt in self.script.statements:
            self.visit(stmt)

    def visit(self, node: Node) -> None:
        method = getattr(self, f"visit_{node.type}", None)
        if method is not None:
            method(node)

    def visit_export_statement(self, node: Node) -> None:
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            self.visit(declaration)


class TypeDeclarationCollector(ScriptVisitor):
    """Collects interface bodies and type alias values by name."""

    def __init__(self, script: CompiledScript):
        super().__init__(script)
        self.declarations: Dict[str, Node] = {}

    def visit_interface_declaration(self, node: Node) -> None:
        name = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        if name is not None and body is not None:
            self.declarations[self.script.text_of(name)] = body

    def visit_type_alias_declaration(self, node: Node) -> None:
        name = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name is not None and value is not None:
            self.declarations[self.script.text_of(name)] = value


class PropsCollector(ScriptVisitor):
    """Adds one catalog entry per declared prop."""

    def __init__(
        self, script: CompiledScript, declarations: Dict[str, Node], analysis: ScriptAnalysis
    ):
        super().__init__(script)
        self.declarations = declarations
        self.analysis = analysis

    def visit_expression_statement(self, node: Node) -> None:
        for expr in node.named_children:
            macro = find_define_props_call(self.script, expr)
            if macro is not None:
                self._collect(macro.call, macro.defaults, {})

    def visit_lexical_declaration(self, node: Node) -> None:
        for decl in node.named_children:
            if decl.type != "variable_declarator":
                continue
            value = decl.child_by_field_name("value")
            if value is None:
                continue
            macro = find_define_props_call(self.script, value)
            if macro is None:
                continue
            target = decl.child_by_field_name("name")
            destructured: Dict[str, Scalar] = {}
            if target is not None and target.type == "object_pattern":
                destructured = self._destructure_defaults(target)
            self._collect(macro.call, macro.defaults, destructured)

    visit_variable_declaration = visit_lexical_declaration

    def _resolve_members(self, call: Node) -> Optional[Node]:
        type_arg = call_type_argument(call)
        if type_arg is None:
            return None
        if type_arg.type == "object_type":
            return type_arg
        if type_arg.type == "type_identifier":
            declared = self.declarations.get(self.script.text_of(type_arg))
            if declared is not None and declared.type in ("object_type", "interface_body"):
                return declared
        return None

    def _collect(
        self, call: Node, defaults: Optional[Node], destructured: Dict[str, Scalar]
    ) -> None:
        members = self._resolve_members(call)
        if members is None:
            return
        object_defaults = self._object_defaults(defaults)

        for member in members.named_children:
            if member.type != "property_signature":
                continue
            key_node = member.child_by_field_name("name")
            if key_node is None or key_node.type != "property_identifier":
                continue
            key = self.script.text_of(key_node)

            values = type_domain(
                self.script, member.child_by_field_name("type"), self.declarations
            )
            if values is None:
                if key in destructured:
                    values = [destructured[key]]
                elif key in object_defaults:
                    values = [object_defaults[key]]
                else:
                    values = [f"mock-{key}"]
            self.analysis.definitions[key] = values

    def _object_defaults(self, node: Optional[Node]) -> Dict[str, Scalar]:
        defaults: Dict[str, Scalar] = {}
        if node is None:
            return defaults
        for pair in node.named_children:
            if pair.type != "pair":
                continue
            key = pair.child_by_field_name("key")
            if key is None or key.type != "property_identifier":
                continue
            value = literal_value(self.script, pair.child_by_field_name("value"))
            if value is not None:
                defaults.setdefault(self.script.text_of(key), value)
        return defaults

    def _destructure_defaults(self, pattern: Node) -> Dict[str, Scalar]:
        defaults: Dict[str, Scalar] = {}
        for child in pattern.named_children:
            if child.type == "object_assignment_pattern":
                key = child.child_by_field_name("left")
                default = child.child_by_field_name("right")
            elif child.type == "pair_pattern":
                key = child.child_by_field_name("key")
                target = child.child_by_field_name("value")
                if target is None or target.type != "assignment_pattern":
                    continue
                default = target.child_by_field_name("right")
            else:
                continue
            if key is None or key.type not in (
                "shorthand_property_identifier_pattern",
                "property_identifier",
            ):
                continue
            value = literal_value(self.script, default)
            if value is not None:
                defaults[self.script.text_of(key)] = value
        return defaults


class VariableCollector(ScriptVisitor):
    """Adds catalog entries for plain script variables with literal values."""

    SKIPPED_BINDINGS = (BindingType.PROPS, BindingType.SETUP_REACTIVE_CONST)

    def __init__(
        self,
        script: CompiledScript,
        analysis: ScriptAnalysis,
        declarations: Optional[Dict[str, Node]] = None,
    ):
        super().__init__(script)
        self.analysis = analysis
        self.declarations = declarations or {}

    def visit_lexical_declaration(self, node: Node) -> None:
        for decl in node.named_children:
            if decl.type == "variable_declarator":
                self._visit_declarator(decl)

    visit_variable_declaration = visit_lexical_declaration

    def _visit_declarator(self, decl: Node) -> None:
        target = decl.child_by_field_name("name")
        if target is None or target.type != "identifier":
            return
        name = self.script.text_of(target)
        if self.script.bindings.get(name) in self.SKIPPED_BINDINGS:
            return

        values = type_domain(
            self.script, decl.child_by_field_name("type"), self.declarations
        )
        if values is not None:
            self.analysis.definitions[name] = values
            return

        value = decl.child_by_field_name("value")
        if value is None:
            return

        scalar = literal_value(self.script, value)
        if scalar is not None:
            self.analysis.definitions[name] = [scalar]
            return

        if call_name(self.script, value) == "ref":
            args = call_arguments(unwrap_expression(value))
            if not args:
                return
            scalar = literal_value(self.script, args[0])
            if scalar is not None:
                self.analysis.definitions[name] = [scalar]
                return
            items = literal_array(self.script, args[0])
            if items is not None:
                self.analysis.definitions[name] = [items]
            return

        items = literal_array(self.script, value)
        if items is not None:
            self.analysis.definitions[name] = [items]
            self.analysis.static_arrays.add(name)
