"""Standalone HTML report of every scenario of a component."""

from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, PackageLoader, select_autoescape

from vue_html_bridge.core.bridge import Scenario
from vue_html_bridge.core.values import js_string
from vue_html_bridge.lint.validate import Violation

_env = Environment(
    loader=PackageLoader("vue_html_bridge", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_report(
    file_path: str,
    scenarios: Sequence[Scenario],
    violations: Optional[List[Violation]] = None,
) -> str:
    """Render ``templates/report.html`` for one component.

    Context values are shown as JavaScript would print them. The violations
    section only appears when ``violations`` is given, even if it is empty.
    """
    template = _env.get_template("report.html")
    return template.render(
        title=Path(file_path).name or "component",
        file_path=file_path,
        scenarios=[
            {
                "index": s.index,
                "context": {k: js_string(v) for k, v in s.context.items()},
                "plain": s.output.plain,
                "annotated": s.output.annotated,
            }
            for s in scenarios
        ],
        violations=violations,
    )
