"""Project configuration.

Settings live in the ``[tool.vue-html-bridge]`` table of the nearest
``pyproject.toml``::

    [tool.vue-html-bridge]
    print-width = 100
    markuplint-command = ["markuplint"]
    concurrency = 4
"""

import logging
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

log = logging.getLogger(__name__)

PROJECT_MARKER = "pyproject.toml"
TOOL_TABLE = "vue-html-bridge"


class ConfigError(Exception):
    """Raised for malformed configuration values."""


@dataclass
class BridgeConfig:
    print_width: int = 80
    indent_width: int = 2
    markuplint_command: List[str] = field(
        default_factory=lambda: ["npx", "--no-install", "markuplint"]
    )
    markuplint_config: Optional[str] = None
    concurrency: int = 1

    def __post_init__(self) -> None:
        for name in ("print_width", "indent_width", "concurrency"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if isinstance(self.markuplint_command, str):
            self.markuplint_command = self.markuplint_command.split()
        if not self.markuplint_command or not all(
            isinstance(part, str) for part in self.markuplint_command
        ):
            raise ConfigError("markuplint_command must be a non-empty list of strings")
        if self.markuplint_config is not None and not isinstance(self.markuplint_config, str):
            raise ConfigError("markuplint_config must be a string")

    def override(self, **changes: Any) -> "BridgeConfig":
        """Copy with the given non-None values replaced (CLI options)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def find_project_root(start: Union[str, Path]) -> Optional[Path]:
    """First directory at or above ``start`` that holds a ``pyproject.toml``."""
    path = Path(start).resolve()
    if path.is_file():
        path = path.parent
    for candidate in [path, *path.parents]:
        if (candidate / PROJECT_MARKER).is_file():
            return candidate
    return None


def load_config(start: Union[str, Path, None] = None) -> BridgeConfig:
    """Load settings for the project containing ``start`` (default: cwd)."""
    root = find_project_root(start if start is not None else Path.cwd())
    if root is None:
        return BridgeConfig()

    pyproject = root / PROJECT_MARKER
    try:
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{pyproject}: {e}") from e

    table = data.get("tool", {}).get(TOOL_TABLE)
    if table is None:
        return BridgeConfig()
    if not isinstance(table, dict):
        raise ConfigError(f"{pyproject}: [tool.{TOOL_TABLE}] must be a table")

    known = {f.name for f in fields(BridgeConfig)}
    options: Dict[str, Any] = {}
    for key, value in table.items():
        name = key.replace("-", "_")
        if name not in known:
            log.warning("Unknown option %r in [tool.%s] of %s", key, TOOL_TABLE, pyproject)
            continue
        options[name] = value

    log.debug("Loaded configuration from %s", pyproject)
    return BridgeConfig(**options)
