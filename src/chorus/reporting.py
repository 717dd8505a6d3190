# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich renderers for detection summaries, tool catalogues and batch results."""

from __future__ import annotations

import linecache
import os
from collections.abc import Sequence
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import ChorusConfig, OutputConfig, StyleConfig
from .constants import THEMES
from .execution import BatchResult, BatchStatus, ToolRun, ToolState
from .logging import emoji, get_console_manager
from .models import LintIssue, ProjectInfo, ToolInfo

_STATE_LABELS: dict[ToolState, str] = {
    ToolState.SUCCESS: "ok",
    ToolState.SKIPPED_DISABLED: "disabled",
    ToolState.SKIPPED_NO_FILES: "no files",
    ToolState.NOT_FOUND: "not found",
    ToolState.EXECUTION_FAILED: "execution failed",
    ToolState.TOOL_FAILED: "tool failed",
}


def _console(style: StyleConfig, console: Console | None) -> Console:
    if console is not None:
        return console
    return get_console_manager().get(color=style.use_color, emoji=style.use_emoji)


def _palette(style: StyleConfig) -> dict[str, str]:
    return THEMES[style.theme] if style.use_color else {key: "" for key in THEMES[style.theme]}


def _styled(value: str, style: str) -> Text:
    return Text(value, style=style) if style else Text(value)


def _table(style: StyleConfig, **kwargs: object) -> Table:
    return Table(box=box.SIMPLE_HEAVY if style.use_color else box.SIMPLE, **kwargs)


def render_project_info(info: ProjectInfo, style: StyleConfig, *, console: Console | None = None) -> None:
    """Print the languages, frameworks and configured tools of a project."""

    target = _console(style, console)
    palette = _palette(style)
    table = _table(style, title=f"{emoji('🔎 ', style.use_emoji)}Detected languages")
    table.add_column("Language", style=palette["accent"] or None)
    table.add_column("Files", justify="right")
    for language in info.languages:
        marker = " (primary)" if language is info.primary_language else ""
        table.add_row(f"{language}{marker}", str(info.file_counts.get(language, 0)))
    target.print(table)

    if info.frameworks:
        names = ", ".join(str(framework) for framework in info.frameworks)
        target.print(_styled(f"Frameworks: {names}", palette["info"]))
    if info.detected_tools:
        tools = _table(style, title="Configured tools")
        tools.add_column("Tool")
        tools.add_column("Type")
        tools.add_column("Language")
        tools.add_column("Config", overflow="fold")
        for tool in info.detected_tools:
            tools.add_row(tool.name, str(tool.tool_type), str(tool.language), str(tool.config_path))
        target.print(tools)
    target.print(_styled(f"{info.total_files} files classified", palette["muted"]))


def render_tool_info(infos: Sequence[ToolInfo], style: StyleConfig, *, console: Console | None = None) -> None:
    """Print a table describing every registered tool."""

    target = _console(style, console)
    palette = _palette(style)
    table = _table(style, title=f"{emoji('🧰 ', style.use_emoji)}Tools")
    table.add_column("Name", no_wrap=True)
    table.add_column("Type")
    table.add_column("Languages")
    table.add_column("Priority", justify="right")
    table.add_column("Status")
    table.add_column("Version", overflow="fold")
    for info in infos:
        status = (
            _styled("available", palette["info"]) if info.available else _styled("missing", palette["warning"])
        )
        table.add_row(
            info.name,
            str(info.tool_type),
            ", ".join(str(language) for language in info.languages),
            str(info.priority),
            status,
            info.version or "-",
        )
    target.print(table)


def format_location(issue: LintIssue, output: OutputConfig, *, root: Path | None = None) -> str:
    """Return the ``file:line:column`` prefix for ``issue`` honouring ``output``.

    Paths are shown relative to ``root`` when given and the file lies beneath it.
    """

    parts: list[str] = []
    if output.show_file_paths and issue.file is not None:
        parts.append(_display_path(issue.file, root))
    if output.show_line_numbers and issue.line is not None:
        parts.append(str(issue.line))
        if issue.column is not None:
            parts.append(str(issue.column))
    return ":".join(parts)


def _display_path(path: Path, root: Path | None) -> str:
    if root is None:
        return str(path)
    try:
        return str(path.absolute().relative_to(root.absolute()))
    except ValueError:
        return os.fspath(path)


def _snippet(issue: LintIssue) -> str | None:
    if issue.file is None or issue.line is None:
        return None
    line = linecache.getline(str(issue.file), issue.line)
    return line.rstrip() or None


def _issue_text(issue: LintIssue, cfg: ChorusConfig, root: Path | None, palette: dict[str, str]) -> Text:
    text = Text()
    location = format_location(issue, cfg.output, root=root)
    if location:
        text.append(f"{location}: ", style=palette["muted"] or None)
    text.append(str(issue.severity), style=palette[issue.severity.value] or None)
    if issue.code:
        text.append(f" [{issue.code}]", style=palette["accent"] or None)
    text.append(f" {issue.message}")
    if issue.fix_available:
        text.append(" (fixable)", style=palette["muted"] or None)
    if cfg.output.show_code_snippets and (snippet := _snippet(issue)) is not None:
        text.append(f"\n    {snippet.strip()}", style=palette["muted"] or None)
    return text


def _render_run(run: ToolRun, cfg: ChorusConfig, root: Path | None, console: Console) -> None:
    palette = _palette(cfg.style)
    if run.error is not None:
        console.print(_styled(f"{run.tool_name}: {run.error}", palette["error"]))
        return
    result = run.result
    if result is None or not result.issues:
        return
    limit = cfg.output.max_issues_per_category
    issues = sorted(result.issues, key=lambda issue: issue.severity, reverse=True)
    body = Text()
    for index, issue in enumerate(issues[:limit]):
        if index:
            body.append("\n")
        body.append_text(_issue_text(issue, cfg, root, palette))
    hidden = len(issues) - limit
    if hidden > 0:
        if limit:
            body.append("\n")
        body.append(f"... {hidden} more", style=palette["muted"] or None)
    border = palette["warning"] if result.success else palette["error"]
    console.print(Panel(body, title=f"{run.tool_name} ({len(issues)})", border_style=border or "none", padding=(0, 1)))


def render_batch(
    batch: BatchResult,
    cfg: ChorusConfig,
    *,
    root: Path | None = None,
    console: Console | None = None,
) -> None:
    """Print the issues of every run in ``batch`` followed by a summary table.

    Args:
        batch: Results to render, in submission order.
        cfg: Configuration supplying output and style preferences.
        root: Base directory for relative paths; ignored when
            ``general.use_relative_paths`` is disabled.
        console: Console override, mainly for tests.
    """

    target = _console(cfg.style, console)
    palette = _palette(cfg.style)
    if batch.status is BatchStatus.NO_TOOLS:
        target.print(_styled("No tools selected", palette["warning"]))
        return
    if batch.status is BatchStatus.NO_FILES:
        target.print(_styled("No files to check", palette["warning"]))
        return

    relative_root = root if cfg.general.use_relative_paths else None
    for run in batch:
        _render_run(run, cfg, relative_root, target)

    summary = _table(cfg.style, title=f"{emoji('📋 ', cfg.style.use_emoji)}Summary")
    summary.add_column("Tool", no_wrap=True)
    summary.add_column("Status")
    summary.add_column("Issues", justify="right")
    summary.add_column("Time", justify="right")
    for run in batch:
        label = _STATE_LABELS.get(run.state, run.state.value)
        role = "info" if run.ok else "error"
        if run.state.is_skip:
            role = "muted"
        elif run.result is not None and not run.result.success:
            role = "warning"
        ran = None if run.state.is_skip else run.result
        issues = str(len(ran.issues)) if ran is not None else "-"
        elapsed = f"{ran.execution_time:.2f}s" if ran is not None else "-"
        summary.add_row(run.tool_name, _styled(label, palette[role]), issues, elapsed)
    target.print(summary)

    counts = ", ".join(f"{count} {severity}" for severity, count in batch.issue_counts().items() if count)
    target.print(_styled(f"Issues: {counts or 'none'}", palette["accent"]))


__all__ = ["format_location", "render_batch", "render_project_info", "render_tool_info"]
