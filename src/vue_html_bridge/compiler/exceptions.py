"""Compiler exceptions."""

from typing import Optional


class BridgeSyntaxError(Exception):
    """Raised when a component source cannot be parsed."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.message = message
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        location = ""
        if self.file_path:
            location = self.file_path
        if self.line is not None:
            location = f"{location}:{self.line}" if location else f"line {self.line}"
            if self.column is not None:
                location = f"{location}:{self.column}"
        return f"{location}: {self.message}" if location else self.message


class ScriptCompileError(BridgeSyntaxError):
    """Raised when the <script setup> block has syntax errors."""

    pass
