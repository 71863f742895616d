"""Render-path enumeration for a whole component."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from vue_html_bridge.compiler.analyzer import analyze_script
from vue_html_bridge.compiler.ast_nodes import SFCDescriptor, TemplateNode
from vue_html_bridge.compiler.parser import TemplateParser
from vue_html_bridge.compiler.sfc import parse_sfc
from vue_html_bridge.config import BridgeConfig
from vue_html_bridge.core.contexts import generate_contexts
from vue_html_bridge.core.permutation import permute_nodes
from vue_html_bridge.core.values import RenderContext
from vue_html_bridge.runtime.formatter import format_html
from vue_html_bridge.runtime.renderer import render_nodes

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BridgeOutput:
    """One reachable rendering: plain HTML and the position-annotated twin."""

    plain: str
    annotated: str

    def to_dict(self) -> Dict[str, str]:
        return {"plain": self.plain, "annotated": self.annotated}


@dataclass(frozen=True)
class Scenario:
    index: int
    context: RenderContext
    output: BridgeOutput


def parse_template(descriptor: SFCDescriptor) -> List[TemplateNode]:
    if descriptor.template is None:
        return []
    return TemplateParser().parse(
        descriptor.template.content,
        origin=descriptor.template.origin,
        file_path=descriptor.file_path,
    )


def iter_scenarios(
    source: str, config: Optional[BridgeConfig] = None, file_path: str = ""
) -> Iterator[Scenario]:
    """Yield every (context, template instantiation) pair in order.

    Raises:
        BridgeSyntaxError: the template markup is malformed.
    """
    config = config or BridgeConfig()
    descriptor = parse_sfc(source, file_path)
    script = descriptor.script_setup.content if descriptor.script_setup else None
    analysis = analyze_script(script)
    nodes = parse_template(descriptor)
    contexts = generate_contexts(analysis.definitions)
    log.debug("%s: %d render contexts", file_path or "<string>", len(contexts))

    index = 0
    for context in contexts:
        instantiations = permute_nodes(nodes, context, analysis.static_arrays)
        log.debug("Context %r: %d scenarios", context, len(instantiations))
        for permuted in instantiations:
            output = BridgeOutput(
                plain=format_html(
                    render_nodes(permuted, context, annotate=False),
                    config.print_width,
                    config.indent_width,
                ),
                annotated=format_html(
                    render_nodes(permuted, context, annotate=True),
                    config.print_width,
                    config.indent_width,
                ),
            )
            yield Scenario(index=index, context=context, output=output)
            index += 1


def bridge(
    source: str, config: Optional[BridgeConfig] = None, file_path: str = ""
) -> List[BridgeOutput]:
    """Every statically reachable HTML rendering of a Vue component."""
    return [scenario.output for scenario in iter_scenarios(source, config, file_path)]
