"""Enumeration of every structurally distinct template instantiation."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from vue_html_bridge.compiler.ast_nodes import ElementNode, TemplateNode
from vue_html_bridge.core.segments import (
    Branch,
    ForBlockSegment,
    IfBlockSegment,
    ImplicitElse,
    ShowBlockSegment,
    StaticSegment,
    group_segments,
)
from vue_html_bridge.core.values import RenderContext, js_string


@dataclass
class PermutedNode:
    """One template node placed in one scenario.

    ``node`` is shared with the parsed template and never modified.
    """

    node: TemplateNode
    loop_context: Optional[Dict[str, str]] = None
    children: Optional[List["PermutedNode"]] = None


PermutationResult = List[PermutedNode]


class TemplatePermuter:
    """Expands template nodes under one render context.

    Each segment multiplies the running set of partial results, starting
    from a single empty result, so possibilities come out in source order.
    """

    def __init__(self, context: RenderContext, static_arrays: Optional[Set[str]] = None):
        self.context = context
        self.static_arrays = static_arrays or set()

    def permute(self, nodes: List[TemplateNode]) -> List[PermutationResult]:
        results: List[PermutationResult] = [[]]
        for segment in group_segments(nodes):
            if isinstance(segment, IfBlockSegment):
                results = self._permute_if(segment, results)
            elif isinstance(segment, ShowBlockSegment):
                results = self._permute_show(segment, results)
            elif isinstance(segment, ForBlockSegment):
                results = self._permute_for(segment, results)
            else:
                results = self._permute_static(segment, results)
        return results

    def _permute_static(
        self, segment: StaticSegment, results: List[PermutationResult]
    ) -> List[PermutationResult]:
        node = segment.node
        if not isinstance(node, ElementNode):
            return [res + [PermutedNode(node=node)] for res in results]

        child_perms = self.permute(node.children)
        return [
            res + [PermutedNode(node=node, children=child_perm)]
            for res in results
            for child_perm in child_perms
        ]

    def _permute_if(
        self, segment: IfBlockSegment, results: List[PermutationResult]
    ) -> List[PermutationResult]:
        next_results: List[PermutationResult] = []
        for res in results:
            for branch in segment.branches:
                next_results.extend(self._permute_branch(branch, res))
        return next_results

    def _permute_branch(
        self, branch: Branch, res: PermutationResult
    ) -> List[PermutationResult]:
        if isinstance(branch, ImplicitElse):
            return [list(res)]
        if not isinstance(branch, ElementNode):
            return [res + [PermutedNode(node=branch)]]

        branch_results: List[PermutationResult] = []
        for child_perm in self.permute(branch.children):
            if branch.tag == "template":
                branch_results.append(res + child_perm)
            else:
                branch_results.append(res + [PermutedNode(node=branch, children=child_perm)])
        return branch_results

    def _permute_show(
        self, segment: ShowBlockSegment, results: List[PermutationResult]
    ) -> List[PermutationResult]:
        child_perms = self.permute(segment.node.children)
        next_results: List[PermutationResult] = []
        for res in results:
            for child_perm in child_perms:
                next_results.append(res + [PermutedNode(node=segment.node, children=child_perm)])
            # hidden
            next_results.append(list(res))
        return next_results

    def _permute_for(
        self, segment: ForBlockSegment, results: List[PermutationResult]
    ) -> List[PermutationResult]:
        if segment.inline_array is not None:
            source = segment.inline_array
        else:
            source = self.context.get(segment.source)

        # An inline [] renders zero items only; no mock iterations are added.
        if segment.inline_array == []:
            return [list(res) for res in results]

        next_results: List[PermutationResult] = []
        is_static = segment.inline_array is not None or segment.source in self.static_arrays
        if not is_static:
            next_results.extend(list(res) for res in results)

        child_perms = self.permute(segment.node.children)
        if isinstance(source, list) and source:
            for res in results:
                for child_perm in child_perms:
                    copies = [
                        PermutedNode(
                            node=segment.node,
                            loop_context={segment.iterator: js_string(item)},
                            children=child_perm,
                        )
                        for item in source
                    ]
                    next_results.append(res + copies)
            return next_results

        mock = {segment.iterator: f"mock-{segment.iterator}"}
        for res in results:
            for child_perm in child_perms:
                for count in (1, 2):
                    copies = [
                        PermutedNode(node=segment.node, loop_context=dict(mock), children=child_perm)
                        for _ in range(count)
                    ]
                    next_results.append(res + copies)
        return next_results


def permute_nodes(
    nodes: List[TemplateNode],
    context: RenderContext,
    static_arrays: Optional[Set[str]] = None,
) -> List[PermutationResult]:
    """Every instantiation of ``nodes`` reachable under ``context``."""
    return TemplatePermuter(context, static_arrays).permute(nodes)
