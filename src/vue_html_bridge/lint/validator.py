"""HTML validators run over generated scenarios."""

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence

from vue_html_bridge.config import BridgeConfig

log = logging.getLogger(__name__)


class ValidatorError(Exception):
    """Raised when a validator cannot be run or its output cannot be read."""


@dataclass(frozen=True)
class Finding:
    """A problem reported by a validator, positioned in the checked HTML."""

    rule_id: str
    message: str
    line: int
    col: int
    raw: str = ""
    severity: str = "error"


class Validator(Protocol):
    async def check(self, html: str, name: str) -> List[Finding]:
        """Check ``html``; ``name`` is the file name it should be judged as."""
        ...


def parse_markuplint_output(output: str) -> List[Finding]:
    """Read ``markuplint --format JSON`` output."""
    if not output.strip():
        return []
    try:
        data: Any = json.loads(output)
    except json.JSONDecodeError as e:
        raise ValidatorError(f"Unreadable markuplint output: {e}") from e

    if isinstance(data, dict):
        data = data.get("violations")
    if not isinstance(data, list):
        raise ValidatorError("Unexpected markuplint output: expected a list of violations")

    findings: List[Finding] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValidatorError(f"Unexpected markuplint violation entry: {item!r}")
        findings.append(
            Finding(
                rule_id=str(item.get("ruleId", "")),
                message=str(item.get("message", "")),
                line=int(item.get("line", 1)),
                col=int(item.get("col", 1)),
                raw=str(item.get("raw", "")),
                severity=str(item.get("severity", "error")),
            )
        )
    return findings


class MarkuplintValidator:
    """Runs the markuplint CLI on a temporary file.

    The file is created next to the component when possible, so markuplint
    picks up the same directory-based configuration the component would.
    """

    def __init__(
        self,
        command: Sequence[str] = ("npx", "--no-install", "markuplint"),
        config_path: Optional[str] = None,
    ):
        self.command = list(command)
        self.config_path = config_path

    @classmethod
    def from_config(cls, config: BridgeConfig) -> "MarkuplintValidator":
        return cls(config.markuplint_command, config.markuplint_config)

    async def check(self, html: str, name: str) -> List[Finding]:
        target = Path(name)
        directory = target.parent if target.parent.is_dir() else None
        fd, path = tempfile.mkstemp(
            prefix=f".{target.stem}.", suffix=".html", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(html)
            return await self._run(path)
        finally:
            os.unlink(path)

    async def _run(self, path: str) -> List[Finding]:
        args = [*self.command, "--format", "JSON", path]
        if self.config_path:
            args.extend(["--config", self.config_path])
        log.debug("Running %s", " ".join(args))

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ValidatorError(f"Could not run {args[0]!r}: {e}") from e

        stdout, stderr = await process.communicate()
        # markuplint exits with 1 when it reports violations
        if process.returncode not in (0, 1):
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise ValidatorError(
                f"markuplint exited with status {process.returncode}: {detail}"
            )
        return parse_markuplint_output(stdout.decode("utf-8", errors="replace"))
