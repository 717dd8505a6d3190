# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the rich renderers."""

from __future__ import annotations

from io import StringIO
from pathlib import Path

from rich.console import Console

from chorus.config import ChorusConfig, OutputConfig
from chorus.errors import ToolNotFoundError
from chorus.execution import BatchResult, BatchStatus, ToolRun, ToolState
from chorus.models import LintIssue, LintResult
from chorus.reporting import format_location, render_batch
from chorus.severity import IssueSeverity


def _console() -> tuple[Console, StringIO]:
    buffer = StringIO()
    return Console(file=buffer, width=120, color_system=None, emoji=False), buffer


def _config(**output: object) -> ChorusConfig:
    return ChorusConfig.model_validate({"style": {"use_color": False, "use_emoji": False}, "output": output})


def _issue(severity: IssueSeverity, message: str, line: int = 1) -> LintIssue:
    return LintIssue(severity=severity, message=message, file=Path("/repo/src/app.py"), line=line, column=2)


def test_format_location_respects_output_flags() -> None:
    issue = _issue(IssueSeverity.ERROR, "boom", line=7)

    assert format_location(issue, OutputConfig(), root=Path("/repo")) == "src/app.py:7:2"
    assert format_location(issue, OutputConfig(), root=Path("/elsewhere")) == "/repo/src/app.py:7:2"
    assert format_location(issue, OutputConfig(show_line_numbers=False)) == "/repo/src/app.py"
    assert format_location(issue, OutputConfig(show_file_paths=False)) == "7:2"


def test_render_batch_orders_by_severity_and_truncates() -> None:
    result = LintResult(
        tool_name="ruff",
        success=True,
        issues=(
            _issue(IssueSeverity.STYLE, "style nit"),
            _issue(IssueSeverity.ERROR, "real bug"),
            _issue(IssueSeverity.WARNING, "suspicious"),
        ),
    )
    batch = BatchResult(runs=(ToolRun(order=0, tool_name="ruff", state=ToolState.SUCCESS, result=result),))
    console, buffer = _console()

    render_batch(batch, _config(max_issues_per_category=2), root=Path("/repo"), console=console)

    output = buffer.getvalue()
    assert output.index("real bug") < output.index("suspicious")
    assert "style nit" not in output
    assert "... 1 more" in output
    assert "src/app.py:1:2" in output
    assert "Issues: 1 error, 1 warning, 1 style" in output


def test_render_batch_reports_errors_and_skips() -> None:
    batch = BatchResult(
        runs=(
            ToolRun(order=0, tool_name="mypy", state=ToolState.NOT_FOUND, error=ToolNotFoundError("mypy")),
            ToolRun(
                order=1,
                tool_name="black",
                state=ToolState.SKIPPED_NO_FILES,
                result=LintResult.skipped("black"),
            ),
        )
    )
    console, buffer = _console()

    render_batch(batch, _config(), console=console)

    output = buffer.getvalue()
    assert "mypy: Tool not found: mypy" in output
    assert "not found" in output
    assert "no files" in output
    skipped_row = next(line for line in output.splitlines() if "black" in line and "no files" in line)
    assert "0.00s" not in skipped_row
    assert "Issues: none" in output


def test_render_batch_short_circuits() -> None:
    console, buffer = _console()

    render_batch(BatchResult(status=BatchStatus.NO_TOOLS), _config(), console=console)
    render_batch(BatchResult(status=BatchStatus.NO_FILES), _config(), console=console)

    assert buffer.getvalue().splitlines() == ["No tools selected", "No files to check"]


def test_code_snippets_are_optional(tmp_path: Path) -> None:
    source = tmp_path / "mod.py"
    source.write_text("first = 1\nsecond = undefined_name\n", encoding="utf-8")
    issue = LintIssue(severity=IssueSeverity.ERROR, message="undefined name", file=source, line=2)
    result = LintResult(tool_name="ruff", success=True, issues=(issue,))
    batch = BatchResult(runs=(ToolRun(order=0, tool_name="ruff", state=ToolState.SUCCESS, result=result),))

    with_snippets, buffer = _console()
    render_batch(batch, _config(show_code_snippets=True), console=with_snippets)
    without, plain = _console()
    render_batch(batch, _config(), console=without)

    assert "second = undefined_name" in buffer.getvalue()
    assert "second = undefined_name" not in plain.getvalue()
