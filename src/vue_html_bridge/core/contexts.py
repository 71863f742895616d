"""Render context generation."""

from itertools import product
from typing import List

from vue_html_bridge.core.values import RenderContext, ValueDefinitions


def generate_contexts(definitions: ValueDefinitions) -> List[RenderContext]:
    """Cartesian product of every name's candidate values.

    The first name varies slowest. With no names there is exactly one, empty,
    context.
    """
    keys = list(definitions)
    return [dict(zip(keys, combo)) for combo in product(*(definitions[k] for k in keys))]
