import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from vue_html_bridge import __version__
from vue_html_bridge.cli.main import cli

COMPONENT = """<template>
  <div :aria-hidden="hidden">
    <img src="a.png">
  </div>
</template>
<script setup lang="ts">
defineProps<{ hidden: 'true' | 'false' }>()
</script>
"""

FAKE_MARKUPLINT = """
import json, sys
html = open(sys.argv[-1], encoding="utf-8").read()
found = []
if "<img" in html and "alt=" not in html:
    found.append({"ruleId": "required-attr", "message": "alt missing", "line": 1, "col": 1, "raw": ""})
print(json.dumps(found))
sys.exit(1 if found else 0)
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    script = tmp_path / "fake_markuplint.py"
    script.write_text(FAKE_MARKUPLINT)
    (tmp_path / "pyproject.toml").write_text(
        "[tool.vue-html-bridge]\n"
        f"markuplint-command = {json.dumps([sys.executable, str(script)])}\n"
        "print-width = 10000\n"
    )
    return tmp_path


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_bridge_prints_json(project: Path) -> None:
    component = project / "Card.vue"
    component.write_text(COMPONENT)

    result = CliRunner().invoke(cli, ["bridge", str(component)])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [d["plain"] for d in data] == [
        '<div aria-hidden="true"><img src="a.png"></div>',
        '<div aria-hidden="false"><img src="a.png"></div>',
    ]
    assert all("data-start-line" in d["annotated"] for d in data)


def test_bridge_syntax_error(tmp_path: Path) -> None:
    component = tmp_path / "Broken.vue"
    component.write_text("<template><div></span></div></template>")

    result = CliRunner().invoke(cli, ["bridge", str(component)])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_bridge_missing_file(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["bridge", str(tmp_path / "missing.vue")])
    assert result.exit_code != 0


def test_lint_reports_violations(project: Path) -> None:
    component = project / "Card.vue"
    component.write_text(COMPONENT)

    result = CliRunner().invoke(cli, ["lint", str(component)])
    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert len(data) == 1
    assert data[0]["ruleId"] == "required-attr"
    assert data[0]["relatedInfo"] == '<div aria-hidden="true"><img src="a.png"></div>'
    # the validator's temporary files are gone
    assert sorted(p.name for p in project.iterdir()) == [
        "Card.vue",
        "fake_markuplint.py",
        "pyproject.toml",
    ]


def test_lint_diagnostics(project: Path) -> None:
    component = project / "Card.vue"
    component.write_text(COMPONENT)

    result = CliRunner().invoke(cli, ["lint", "--diagnostics", str(component)])
    assert result.exit_code == 1
    (diagnostic,) = json.loads(result.stdout)
    assert diagnostic["source"] == "vue-html-bridge"
    assert diagnostic["code"] == "required-attr"
    assert diagnostic["message"].startswith("alt missing\n\nGenerated HTML:\n")


def test_lint_clean_component(project: Path) -> None:
    component = project / "Clean.vue"
    component.write_text('<template><img src="a.png" alt="A"></template>\n')

    result = CliRunner().invoke(cli, ["lint", str(component)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == []


def test_lint_validator_failure(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[tool.vue-html-bridge]\n"
        'markuplint-command = ["definitely-not-a-real-command-xyz"]\n'
    )
    component = tmp_path / "Card.vue"
    component.write_text(COMPONENT)

    result = CliRunner().invoke(cli, ["lint", str(component)])
    assert result.exit_code == 1
    assert "Could not run" in result.output


def test_report_writes_html(project: Path) -> None:
    component = project / "Card.vue"
    component.write_text(COMPONENT)
    out = project / "report.html"

    result = CliRunner().invoke(cli, ["report", str(component), "-o", str(out), "--lint"])
    assert result.exit_code == 0, result.output
    assert "Wrote 2 scenarios" in result.output
    html = out.read_text(encoding="utf-8")
    assert "Scenarios (2)" in html
    assert "Violations (1)" in html
    assert "required-attr" in html
