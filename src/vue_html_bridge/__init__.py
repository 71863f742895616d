from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vue-html-bridge")
except PackageNotFoundError:
    __version__ = "unknown"

from vue_html_bridge.compiler.exceptions import BridgeSyntaxError, ScriptCompileError
from vue_html_bridge.config import BridgeConfig, ConfigError, load_config
from vue_html_bridge.core.bridge import BridgeOutput, Scenario, bridge, iter_scenarios
from vue_html_bridge.lint.diagnostics import Diagnostic, to_diagnostics
from vue_html_bridge.lint.remap import MappedLocation, map_location
from vue_html_bridge.lint.validate import Violation, validate
from vue_html_bridge.lint.validator import (
    Finding,
    MarkuplintValidator,
    Validator,
    ValidatorError,
)

__all__ = [
    "bridge",
    "iter_scenarios",
    "BridgeOutput",
    "Scenario",
    "BridgeConfig",
    "load_config",
    "validate",
    "Violation",
    "Finding",
    "Validator",
    "MarkuplintValidator",
    "map_location",
    "MappedLocation",
    "to_diagnostics",
    "Diagnostic",
    "BridgeSyntaxError",
    "ScriptCompileError",
    "ConfigError",
    "ValidatorError",
]
