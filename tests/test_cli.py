from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from covgate import __version__
from covgate.cli import cli


def _run(runner: CliRunner, args: list[str]) -> Result:
    """Invoke the CLI and return the click result."""
    return runner.invoke(cli, args)


@pytest.fixture
def project(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    istanbul_file: Callable[..., dict[str, Any]],
) -> Path:
    """A project directory holding ``coverage/coverage-final.json`` with 75% statement coverage."""
    monkeypatch.chdir(tmp_path)
    report = tmp_path / "coverage" / "coverage-final.json"
    report.parent.mkdir()
    report.write_text(
        json.dumps(
            {
                "src/a.js": istanbul_file("src/a.js", statements=[1, 1, 1, 0], statement_lines=[1, 2, 3, 3]),
                "vendor/lib.js": istanbul_file("vendor/lib.js", statements=[0]),
            }
        ),
        encoding="utf-8",
    )
    return tmp_path


def test_version(cli_runner: CliRunner) -> None:
    result = _run(cli_runner, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_violations_exit_with_status_1(cli_runner: CliRunner, project: Path) -> None:
    result = _run(cli_runner, ["check", "--global", "80", "--exclude", "vendor/**", "--no-color"])
    assert result.exit_code == 1
    assert result.stdout == "Low Coverage: GLOBAL 75% of 80% statements\n"


def test_passing_check_is_silent(cli_runner: CliRunner, project: Path) -> None:
    result = _run(cli_runner, ["check", "--global", "70", "--each", "lines=-1", "-x", "vendor/**"])
    assert result.exit_code == 0
    assert result.stdout == ""


def test_explicit_input_and_per_file_rule(cli_runner: CliRunner, project: Path) -> None:
    report = project / "coverage" / "coverage-final.json"
    result = _run(cli_runner, ["check", str(report), "--each", "statements=50", "--no-color"])
    assert result.exit_code == 1
    assert result.stdout == "Low Coverage: vendor/lib.js 0% of 50% statements\n"


def test_configuration_from_pyproject(cli_runner: CliRunner, project: Path) -> None:
    (project / "pyproject.toml").write_text(
        "[tool.covgate]\n"
        'reporters = ["teamcity"]\n'
        "[tool.covgate.thresholds]\n"
        "each = { statements = 50 }\n",
        encoding="utf-8",
    )
    result = _run(cli_runner, ["check"])
    assert result.exit_code == 1
    assert result.stdout == (
        "##teamcity[buildProblem description='Low Coverage: vendor/lib.js 0% of 50% statements'"
        " identity='lowCodeCoverage']\n"
    )


def test_colored_output(cli_runner: CliRunner, project: Path) -> None:
    result = _run(cli_runner, ["check", "--global", "80", "-x", "vendor/**", "--color"])
    assert result.exit_code == 1
    assert "\x1b[" in result.stdout


def test_cobertura_input(
    cli_runner: CliRunner,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    coverage_xml_file: Callable[..., Path],
) -> None:
    monkeypatch.chdir(tmp_path)
    coverage_xml_file({"pkg/a.py": {1: 1, 2: 0}})
    result = _run(cli_runner, ["check", "--global", "lines=60", "--no-color"])
    assert result.exit_code == 1
    assert result.stdout == "Low Coverage: GLOBAL 50% of 60% lines\n"


def test_missing_input_exits_66(cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = _run(cli_runner, ["check"])
    assert result.exit_code == 66
    assert "ERROR: no coverage input provided" in result.output


def test_malformed_input_exits_65(cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "coverage-final.json").write_text("{", encoding="utf-8")
    result = _run(cli_runner, ["check"])
    assert result.exit_code == 65
    assert "invalid coverage JSON" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["check", "--global", "lots"],
        ["check", "--global", "nan"],
        ["check", "--each", "branches=inf"],
        ["check", "--reporter", "junit"],
    ],
)
def test_configuration_errors_exit_78(cli_runner: CliRunner, project: Path, args: list[str]) -> None:
    result = _run(cli_runner, args)
    assert result.exit_code == 78
    assert "ERROR:" in result.output


def test_mixed_input_formats_are_rejected(
    cli_runner: CliRunner,
    project: Path,
    coverage_xml_file: Callable[..., Path],
) -> None:
    xml = coverage_xml_file({"pkg/a.py": {1: 1}})
    report = project / "coverage" / "coverage-final.json"
    result = _run(cli_runner, ["check", str(report), str(xml)])
    assert result.exit_code == 78
    assert "cannot mix" in result.output
