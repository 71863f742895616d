"""Literal values as seen by templates."""

import math
from typing import Dict, List, Union

Scalar = Union[str, int, float, bool]
Value = Union[Scalar, List[Union[str, int, float]]]

ValueDefinitions = Dict[str, List[Value]]
RenderContext = Dict[str, Value]


def parse_number(text: str) -> Union[int, float]:
    """Parse a JavaScript numeric literal (``42``, ``1_000``, ``0x1f``, ``1.5e3``)."""
    literal = text.replace("_", "").lower()
    if literal.endswith("n"):
        literal = literal[:-1]
    if literal.startswith(("0x", "0o", "0b")):
        return int(literal, 0)
    if any(ch in literal for ch in ".e") or literal in ("infinity", "nan"):
        return float(literal)
    return int(literal)


def js_string(value: object) -> str:
    """Stringify ``value`` the way JavaScript's ``String()`` does."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else js_string(item) for item in value)
    return str(value)
