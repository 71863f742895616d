"""Main CLI entry point."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler

from vue_html_bridge import __version__
from vue_html_bridge.compiler.exceptions import BridgeSyntaxError
from vue_html_bridge.config import BridgeConfig, ConfigError, load_config
from vue_html_bridge.core.bridge import bridge as run_bridge
from vue_html_bridge.core.bridge import iter_scenarios
from vue_html_bridge.lint.diagnostics import to_diagnostics
from vue_html_bridge.lint.validate import validate
from vue_html_bridge.lint.validator import ValidatorError

console = Console()
err_console = Console(stderr=True)

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.STYLE_COMMANDS_TABLE_SHOW_LINES = False
click.rich_click.STYLE_COMMANDS_TABLE_PAD_EDGE = False
click.rich_click.STYLE_COMMANDS_TABLE_BOX = None
click.rich_click.STYLE_OPTIONS_TABLE_EXPAND = False
click.rich_click.STYLE_COMMANDS_TABLE_HEADER = "bold magenta"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = (
    "Try running 'vue-html-bridge --help' for more information."
)
click.rich_click.STYLE_OPTIONS_TABLE_BOX = None
click.rich_click.STYLE_COMMANDS_PANEL_BOX = None
click.rich_click.STYLE_OPTIONS_PANEL_BOX = None

# Green theme
click.rich_click.STYLE_HEADER_TEXT = "bold green"
click.rich_click.STYLE_OPTION = "green"
click.rich_click.STYLE_SWITCH = "green"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "green"
click.rich_click.STYLE_USAGE = "dim"

click.rich_click.COMMAND_GROUPS = {
    "vue-html-bridge": [
        {
            "name": "Commands",
            "commands": ["bridge", "lint", "report"],
        }
    ]
}

USER_ERRORS = (BridgeSyntaxError, ConfigError, ValidatorError, OSError)


def _fail(error: Exception) -> None:
    err_console.print(f"[bold red]Error:[/] {error}", highlight=False)
    sys.exit(1)


def _read(file: str) -> str:
    return Path(file).read_text(encoding="utf-8")


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _config_for(file: str, **overrides: Any) -> BridgeConfig:
    return load_config(Path(file).resolve().parent).override(**overrides)


@click.group(
    help=f"""
[bold white on green] vue-html-bridge [/] [bold green]v{__version__}[/] Every reachable HTML rendering of a Vue component.

Run [bold green]vue-html-bridge bridge FILE[/] to print all renderings as JSON.
Run [bold green]vue-html-bridge lint FILE[/] to check them with markuplint.
"""
)
@click.version_option(__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        )


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--print-width", type=int, default=None, help="Line width of formatted HTML")
def bridge(file: str, print_width: Optional[int]) -> None:
    """Print every rendering of FILE as JSON."""
    try:
        config = _config_for(file, print_width=print_width)
        outputs = run_bridge(_read(file), config, file_path=file)
    except USER_ERRORS as e:
        _fail(e)
        return
    _echo_json([output.to_dict() for output in outputs])


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--diagnostics", is_flag=True, help="Print editor diagnostics instead")
@click.option("--concurrency", type=int, default=None, help="Parallel validator runs")
@click.option("--markuplint-config", default=None, help="markuplint config file")
def lint(
    file: str,
    diagnostics: bool,
    concurrency: Optional[int],
    markuplint_config: Optional[str],
) -> None:
    """Validate every rendering of FILE with markuplint.

    Exits with status 1 when any violation is reported.
    """
    absolute = str(Path(file).resolve())
    try:
        config = _config_for(
            file, concurrency=concurrency, markuplint_config=markuplint_config
        )
        violations = asyncio.run(validate(_read(file), absolute, config=config))
    except USER_ERRORS as e:
        _fail(e)
        return

    if diagnostics:
        _echo_json([d.to_dict() for d in to_diagnostics(violations)])
    else:
        _echo_json([v.to_dict() for v in violations])
    sys.exit(1 if violations else 0)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False), help="HTML file to write")
@click.option("--lint", "with_lint", is_flag=True, help="Include markuplint violations")
def report(file: str, output: str, with_lint: bool) -> None:
    """Write an HTML report of every rendering of FILE."""
    from vue_html_bridge.runtime.report import render_report

    try:
        config = _config_for(file)
        source = _read(file)
        scenarios = list(iter_scenarios(source, config, file_path=file))
        violations = None
        if with_lint:
            violations = asyncio.run(
                validate(source, str(Path(file).resolve()), config=config)
            )
        Path(output).write_text(
            render_report(file, scenarios, violations), encoding="utf-8"
        )
    except USER_ERRORS as e:
        _fail(e)
        return

    console.print(
        f"Wrote [green]{len(scenarios)}[/] scenarios to [cyan]{output}[/]", highlight=False
    )


if __name__ == "__main__":
    cli()
