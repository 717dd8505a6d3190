# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""End-to-end tests for the Typer application using fake tools."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from chorus import __version__
from chorus.cli import CLIState, app
from chorus.cli.options import GlobalOptions, SelectionOptions
from chorus.cli.runtime import load_cli_config
from chorus.config import ChorusConfig
from chorus.languages import Language
from chorus.models import LintIssue, ToolType
from chorus.severity import IssueSeverity
from chorus.tools import ToolRegistry

from .conftest import FakeTool

pytestmark = pytest.mark.usefixtures("no_git")


def _issue(severity: IssueSeverity) -> LintIssue:
    return LintIssue(severity=severity, message="something is off", file=Path("a.py"), line=3, code="X100")


def _state(*tools: FakeTool, config: ChorusConfig | None = None) -> CLIState:
    return CLIState(registry=ToolRegistry(tools), config=config or ChorusConfig())


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, write_files: Callable[..., list[Path]]) -> Path:
    write_files({"a.py": "import os\n", "lib/b.py": "x = 1\n", "README.md": "# demo\n"})
    return tmp_path


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_detect_reports_languages(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(app, ["--no-color", "detect", str(project)], obj=_state())

    assert result.exit_code == 0, result.output
    assert "python (primary)" in result.output
    assert "markdown" in result.output
    assert "3 files classified" in result.output


def test_detect_with_patterns(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(app, ["detect", str(project), "--pattern", "*.md"], obj=_state())

    assert result.exit_code == 0, result.output
    assert "markdown (primary)" in result.output
    assert "python" not in result.output


def test_detect_rejects_missing_paths(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["--no-emoji", "detect", str(tmp_path / "missing")], obj=_state())

    assert result.exit_code == 2
    assert "Invalid directory" in result.output


def test_detect_patterns_need_a_single_directory(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(app, ["detect", str(project), str(project / "lib"), "-p", "*.py"], obj=_state())

    assert result.exit_code == 2


def test_tools_lists_and_filters(runner: CliRunner) -> None:
    state = _state(
        FakeTool("ruff"),
        FakeTool("clippy", languages=(Language.RUST,), extensions=("rs",)),
        FakeTool("gofmt", languages=(Language.GO,), tool_type=ToolType.FORMATTER, available=False),
    )

    everything = runner.invoke(app, ["--no-emoji", "tools"], obj=state)
    rust = runner.invoke(app, ["tools", "--language", "rust"], obj=state)
    available = runner.invoke(app, ["tools", "--available"], obj=state)
    formatters = runner.invoke(app, ["tools", "-t", "formatter"], obj=state)

    assert everything.exit_code == 0, everything.output
    assert all(name in everything.output for name in ("ruff", "clippy", "gofmt", "missing", "1.0.0"))
    assert "clippy" in rust.output and "ruff" not in rust.output
    assert "gofmt" not in available.output
    assert "gofmt" in formatters.output and "ruff" not in formatters.output


def test_check_fails_on_errors(runner: CliRunner, project: Path) -> None:
    linter = FakeTool("ruff", issues=[_issue(IssueSeverity.ERROR)])

    result = runner.invoke(app, ["--no-emoji", "check", str(project)], obj=_state(linter))

    assert result.exit_code == 1, result.output
    assert "something is off" in result.output
    assert "X100" in result.output
    assert len(linter.calls) == 1


def test_check_passes_below_fail_level(runner: CliRunner, project: Path) -> None:
    linter = FakeTool("ruff", issues=[_issue(IssueSeverity.WARNING)])
    formatter = FakeTool("black", tool_type=ToolType.FORMATTER)

    result = runner.invoke(app, ["--no-emoji", "check", str(project)], obj=_state(linter, formatter))

    assert result.exit_code == 0, result.output
    assert "All tools passed" in result.output
    ((_, config),) = formatter.calls
    assert config.check is True
    assert linter.calls[0][1].auto_fix is False


def test_check_honours_configured_fail_level(runner: CliRunner, project: Path) -> None:
    config = ChorusConfig.model_validate({"general": {"fail_level": "warning"}})
    linter = FakeTool("ruff", issues=[_issue(IssueSeverity.WARNING)])

    result = runner.invoke(app, ["check", str(project)], obj=_state(linter, config=config))

    assert result.exit_code == 1


def test_check_auto_fix_and_type_filter(runner: CliRunner, project: Path) -> None:
    linter = FakeTool("ruff")
    checker = FakeTool("mypy", tool_type=ToolType.TYPECHECKER)

    result = runner.invoke(app, ["check", str(project), "--auto-fix", "--type", "linter"], obj=_state(linter, checker))

    assert result.exit_code == 0, result.output
    assert linter.calls[0][1].auto_fix is True
    assert checker.calls == []


def test_unavailable_tools_are_skipped_unless_named(runner: CliRunner, project: Path) -> None:
    missing = FakeTool("pylint", available=False)
    present = FakeTool("ruff")
    state = _state(missing, present)

    skipped = runner.invoke(app, ["--no-emoji", "check", str(project)], obj=state)
    named = runner.invoke(app, ["--no-emoji", "check", str(project), "--tools", "pylint,ruff"], obj=state)

    assert skipped.exit_code == 0, skipped.output
    assert "Skipping unavailable linter: pylint" in skipped.output
    assert named.exit_code == 1
    assert "not found" in named.output.lower()


def test_unknown_tool_names_are_usage_errors(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(app, ["check", str(project), "--tools", "nope"], obj=_state(FakeTool("ruff")))

    assert result.exit_code == 2


def test_explicit_mode_passes_inputs_verbatim(runner: CliRunner, project: Path) -> None:
    linter = FakeTool("ruff")
    target = project / "lib" / "b.py"

    result = runner.invoke(app, ["check", "--explicit", str(target)], obj=_state(linter))

    assert result.exit_code == 0, result.output
    assert linter.calls[0][0] == [target]


def test_explicit_mode_hands_directories_to_tools(runner: CliRunner, project: Path) -> None:
    formatter = FakeTool("fmt", tool_type=ToolType.FORMATTER)

    result = runner.invoke(
        app, ["--no-emoji", "format", "--explicit", "--tools", "fmt", str(project / "lib")], obj=_state(formatter)
    )

    assert result.exit_code == 0, result.output
    assert formatter.calls[0][0] == [project / "lib"]
    assert "no files" not in result.output


def test_discovered_mode_collapses_directories(runner: CliRunner, project: Path) -> None:
    linter = FakeTool("ruff")

    runner.invoke(app, ["check", str(project / "lib")], obj=_state(linter))
    runner.invoke(app, ["check", str(project)], obj=_state(linter))

    assert linter.calls[0][0] == [project / "lib" / "b.py"]
    assert linter.calls[1][0] == [project / "a.py", project / "lib" / "b.py"]


def test_format_uses_best_formatter_and_check_mode(runner: CliRunner, project: Path) -> None:
    preferred = FakeTool(
        "ruff-format",
        tool_type=ToolType.FORMATTER,
        priority=20,
        success=False,
        issues=[LintIssue(severity=IssueSeverity.STYLE, message="File needs formatting", file=project / "a.py")],
    )
    fallback = FakeTool("black", tool_type=ToolType.FORMATTER, priority=10)
    state = _state(preferred, fallback)

    checked = runner.invoke(app, ["format", str(project), "--check"], obj=state)
    written = runner.invoke(app, ["format", str(project)], obj=_state(FakeTool("black", tool_type=ToolType.FORMATTER)))

    assert checked.exit_code == 1
    assert fallback.calls == []
    assert preferred.calls[0][1].check is True
    assert written.exit_code == 0


def test_fix_runs_formatters_then_fixers(runner: CliRunner, project: Path) -> None:
    formatter = FakeTool("black", tool_type=ToolType.FORMATTER)
    fixer = FakeTool("autofix", tool_type=ToolType.FIXER)
    fixable = FakeTool("ruff")
    fixable.supports_fix = True
    plain = FakeTool("pylint")
    state = _state(formatter, fixer, fixable, plain)

    result = runner.invoke(app, ["--no-emoji", "fix", str(project)], obj=state)

    assert result.exit_code == 0, result.output
    assert formatter.calls[0][1].check is False
    assert fixer.calls[0][1].auto_fix is True
    assert fixable.calls[0][1].auto_fix is True
    assert plain.calls == []
    assert "Formatting" in result.output and "Fixing" in result.output


def test_fix_without_format_and_with_verification(runner: CliRunner, project: Path) -> None:
    formatter = FakeTool("black", tool_type=ToolType.FORMATTER)
    fixer = FakeTool("autofix", tool_type=ToolType.FIXER)
    linter = FakeTool("pylint", issues=[_issue(IssueSeverity.ERROR)])
    state = _state(formatter, fixer, linter)

    result = runner.invoke(app, ["--no-color", "fix", str(project), "--no-format", "--check"], obj=state)

    assert result.exit_code == 1
    assert len(formatter.calls) == 1
    assert formatter.calls[0][1].check is True
    assert linter.calls[0][1].auto_fix is False
    assert "--- Verifying ---" in result.output


def test_invalid_configuration_is_a_usage_error(runner: CliRunner, project: Path) -> None:
    (project / ".chorus.toml").write_text("[general]\njobs = 0\n", encoding="utf-8")

    result = runner.invoke(app, ["--no-emoji", "check", str(project)], obj=CLIState(registry=ToolRegistry()))

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_missing_input_is_a_usage_error(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["check", str(tmp_path / "ghost")], obj=_state(FakeTool("ruff")))

    assert result.exit_code == 2


def test_global_options_override_configuration() -> None:
    base = ChorusConfig()
    state = CLIState(options=GlobalOptions(no_emoji=True, no_color=True, jobs=2), config=base)

    config = load_cli_config(state, Path.cwd())

    assert config.style.use_emoji is False
    assert config.style.use_color is False
    assert config.general.jobs == 2
    assert base.style.use_emoji is True


def test_selection_options_split_tool_names() -> None:
    selection = SelectionOptions.from_cli(
        None, git_modified=False, tools=["ruff,black", "ruff", " mypy "], types=None, explicit=False
    )

    assert selection.tools == ["ruff", "black", "mypy"]
    assert selection.paths == []
