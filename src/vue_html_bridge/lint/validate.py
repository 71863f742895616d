"""Validation of every reachable rendering of a component."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from vue_html_bridge.config import BridgeConfig
from vue_html_bridge.core.bridge import Scenario, iter_scenarios
from vue_html_bridge.lint.remap import map_location
from vue_html_bridge.lint.validator import Finding, MarkuplintValidator, Validator

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    rule_id: str
    message: str
    line: int
    col: int
    raw: str
    # plain HTML of the scenario the violation was first seen in
    related_info: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ruleId": self.rule_id,
            "message": self.message,
            "line": self.line,
            "col": self.col,
            "raw": self.raw,
            "relatedInfo": self.related_info,
        }


async def validate(
    source: str,
    template_path: str,
    validator: Optional[Validator] = None,
    config: Optional[BridgeConfig] = None,
) -> List[Violation]:
    """Validate every scenario of a component and report source positions.

    Violations with the same rule and message are reported once, for the
    first scenario (in enumeration order) that produced them.
    """
    config = config or BridgeConfig()
    if validator is None:
        validator = MarkuplintValidator.from_config(config)

    scenarios = list(iter_scenarios(source, config, file_path=template_path))
    semaphore = asyncio.Semaphore(config.concurrency)
    name = f"{template_path}.html"

    async def check(scenario: Scenario) -> List[Finding]:
        async with semaphore:
            return await validator.check(scenario.output.annotated, name)

    results = await asyncio.gather(*(check(s) for s in scenarios))

    violations: List[Violation] = []
    seen: Set[Tuple[str, str]] = set()
    for scenario, findings in zip(scenarios, results):
        for finding in findings:
            key = (finding.rule_id, finding.message)
            if key in seen:
                continue
            seen.add(key)
            mapped = map_location(
                scenario.output.annotated, finding.line, finding.col, finding.raw
            )
            violations.append(
                Violation(
                    rule_id=finding.rule_id,
                    message=finding.message,
                    line=mapped.line,
                    col=mapped.col,
                    raw=finding.raw,
                    related_info=scenario.output.plain,
                )
            )

    log.debug(
        "%s: %d scenarios checked, %d violations", template_path, len(scenarios), len(violations)
    )
    return violations
