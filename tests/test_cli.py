"""Tests for the CLI entry points."""

import json
from pathlib import Path

from click.testing import CliRunner

from boxflow import __version__
from boxflow.cli import cli

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"
PIPELINE_JSON = EXAMPLES_DIR / "pipeline.json"
OVERLAP_JSON = EXAMPLES_DIR / "overlap.json"
BAD_CONSTRAINT_JSON = EXAMPLES_DIR / "bad_constraint.json"


def test_render_produces_svg(tmp_path):
    """render command produces an SVG file."""
    out = tmp_path / "output.svg"
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(PIPELINE_JSON), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()
    assert "<svg" in out.read_text()
    assert "-> " in result.output


def test_render_default_output(tmp_path):
    """render command uses input stem + .svg when no -o given."""
    src = tmp_path / "diagram.json"
    src.write_text(PIPELINE_JSON.read_text())
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(src), "--theme", "dark"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "diagram.svg").exists()


def test_render_with_lint_fails_on_diagnostics(tmp_path):
    out = tmp_path / "overlap.svg"
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(OVERLAP_JSON), "-o", str(out), "--lint"])
    assert result.exit_code == 1
    # The SVG is still written
    assert out.exists()
    assert "[overlap]" in result.output


def test_render_gap_option(tmp_path):
    out = tmp_path / "wide.svg"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["render", str(OVERLAP_JSON), "-o", str(out), "--gap", "100"]
    )
    assert result.exit_code == 0, result.output


def test_lint_clean():
    runner = CliRunner()
    result = runner.invoke(cli, ["lint", str(PIPELINE_JSON)])
    assert result.exit_code == 0, result.output
    assert "No diagnostics." in result.output


def test_lint_reports_overlap():
    runner = CliRunner()
    result = runner.invoke(cli, ["lint", str(OVERLAP_JSON)])
    assert result.exit_code == 1
    assert "'a' and 'b' overlap" in result.output


def test_lint_json():
    runner = CliRunner()
    result = runner.invoke(cli, ["lint", "--json", str(OVERLAP_JSON)])
    assert result.exit_code == 1
    records = json.loads(result.output)
    assert {r["kind"] for r in records} >= {"overlap"}
    assert all(r["severity"] == "advisory" for r in records)


def test_info_output():
    """info command prints diagram metadata."""
    runner = CliRunner()
    result = runner.invoke(cli, ["info", str(PIPELINE_JSON)])
    assert result.exit_code == 0, result.output
    assert "Nodes: 6 (2 containers, 4 shapes)" in result.output
    assert "Connections: 3" in result.output
    assert "Constraints: 0" in result.output
    assert "Canvas:" in result.output


def test_errors_exit_nonzero():
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(BAD_CONSTRAINT_JSON)])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "ghost" in result.output


def test_malformed_json_is_an_error(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{]")
    runner = CliRunner()
    result = runner.invoke(cli, ["lint", str(bad)])
    assert result.exit_code == 1
    assert "not valid JSON" in result.output


def test_version():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_verbose_flag(tmp_path):
    out = tmp_path / "out.svg"
    runner = CliRunner()
    result = runner.invoke(cli, ["--verbose", "render", str(PIPELINE_JSON), "-o", str(out)])
    assert result.exit_code == 0, result.output


def test_lint_gap_matches_render_gap(tmp_path):
    """lint lays the diagram out with the same gap and padding as render."""
    src = tmp_path / "tight.json"
    src.write_text(json.dumps({
        "root": {"kind": "row", "children": [
            {"kind": "rect", "id": "a", "options": {"size": 50}},
            {"kind": "rect", "id": "b", "options": {"size": 50, "dx": -40}},
        ]},
    }))
    runner = CliRunner()
    assert runner.invoke(cli, ["lint", str(src)]).exit_code == 1
    result = runner.invoke(cli, ["lint", "--gap", "60", str(src)])
    assert result.exit_code == 0, result.output
    out = tmp_path / "tight.svg"
    result = runner.invoke(
        cli, ["render", str(src), "-o", str(out), "--gap", "60", "--lint"]
    )
    assert result.exit_code == 0, result.output


def test_ill_typed_constraint_number_is_an_error(tmp_path):
    bad = tmp_path / "null_offset.json"
    bad.write_text(json.dumps({
        "children": [{"kind": "rect", "id": "a"}, {"kind": "rect", "id": "b"}],
        "constraints": [{"target": "b.left", "source": "a.right", "offset": None}],
    }))
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(bad)])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "'offset' must be a number" in result.output
