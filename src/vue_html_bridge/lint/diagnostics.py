"""Editor diagnostics (Language Server Protocol shape) for violations."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional

from vue_html_bridge.lint.validate import Violation

DIAGNOSTIC_SOURCE = "vue-html-bridge"


class DiagnosticSeverity(IntEnum):
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(frozen=True)
class Position:
    """0-based line and character."""

    line: int
    character: int

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    source: str = DIAGNOSTIC_SOURCE
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "severity": int(self.severity),
            "range": self.range.to_dict(),
            "message": self.message,
            "source": self.source,
        }
        if self.code:
            data["code"] = self.code
        return data


def to_diagnostic(violation: Violation) -> Diagnostic:
    line = max(0, violation.line - 1)
    return Diagnostic(
        range=Range(
            start=Position(line, max(0, violation.col - 1)),
            end=Position(line, max(0, violation.col + len(violation.raw) - 1)),
        ),
        message=f"{violation.message}\n\nGenerated HTML:\n{violation.related_info}",
        code=violation.rule_id or None,
    )


def to_diagnostics(violations: Iterable[Violation]) -> List[Diagnostic]:
    return [to_diagnostic(v) for v in violations]
