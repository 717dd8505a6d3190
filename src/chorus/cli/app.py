# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application: detect, check, format, fix and tools commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .. import __version__
from ..detection import LanguageDetector
from ..errors import ConfigError, DetectionError
from ..execution import BatchResult
from ..languages import Language
from ..logging import configure_logging, fail, ok
from ..models import ToolConfig, ToolType
from ..reporting import render_project_info, render_tool_info
from ..tools import LintTool, describe_tool
from .options import (
    CheckOption,
    ExplicitOption,
    GitModifiedOption,
    GlobalOptions,
    PathsArgument,
    SelectionOptions,
    ToolsOption,
    TypeOption,
)
from .runtime import (
    EXIT_OK,
    EXIT_USAGE,
    CLIState,
    Runtime,
    build_runtime,
    exit_code_for,
    load_cli_config,
    run_stage,
    select_tools,
    state_from,
)

app = typer.Typer(
    name="chorus",
    help="Project-aware front end for linters, formatters and type checkers.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"chorus {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Emit debug logging.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in console output.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable ANSI colour output.")] = False,
    jobs: Annotated[
        int | None,
        typer.Option("--jobs", "-j", min=1, help="Maximum number of tools to run concurrently."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Project configuration file to use instead of the nearest .chorus.toml."),
    ] = None,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Detect project languages and run the right tools for them."""

    state = state_from(ctx)
    state.options = GlobalOptions(
        verbose=verbose,
        no_emoji=no_emoji,
        no_color=no_color,
        jobs=jobs,
        config_path=config_path,
    )
    configure_logging(verbose)


def _abort(state: CLIState, message: str) -> typer.Exit:
    fail(message, use_emoji=not state.options.no_emoji, use_color=not state.options.no_color)
    return typer.Exit(code=EXIT_USAGE)


def _runtime(state: CLIState, selection: SelectionOptions) -> Runtime:
    try:
        return build_runtime(state, selection)
    except ConfigError as exc:
        raise _abort(state, f"Configuration error: {exc}") from exc
    except FileNotFoundError as exc:
        raise _abort(state, str(exc)) from exc


def _finish(runtime: Runtime, batches: list[BatchResult]) -> None:
    code = exit_code_for(batches, runtime.config)
    if code == EXIT_OK:
        ok("All tools passed", use_emoji=runtime.use_emoji, use_color=runtime.use_color)
    raise typer.Exit(code=code)


def _check_mode(tool: LintTool, config: ToolConfig) -> ToolConfig:
    return config.model_copy(update={"check": tool.tool_type is ToolType.FORMATTER, "auto_fix": False})


def _write_mode(tool: LintTool, config: ToolConfig) -> ToolConfig:
    return config.model_copy(update={"check": False})


def _fixing(tool: LintTool, config: ToolConfig) -> ToolConfig:
    return config.model_copy(update={"auto_fix": True})


def _can_fix(tool: LintTool) -> bool:
    return tool.tool_type is ToolType.FIXER or getattr(tool, "supports_fix", False)


@app.command()
def detect(
    ctx: typer.Context,
    paths: PathsArgument = None,
    patterns: Annotated[
        list[str] | None,
        typer.Option("--pattern", "-p", help="Glob pattern relative to the single directory argument (repeatable)."),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", min=0, help="Limit directory recursion when git is not available."),
    ] = None,
) -> None:
    """Report the languages, frameworks and tool configurations of a project."""

    state = state_from(ctx)
    targets = list(paths or [])
    root = targets[0] if len(targets) == 1 and targets[0].is_dir() else Path.cwd()
    try:
        config = load_cli_config(state, root)
    except ConfigError as exc:
        raise _abort(state, f"Configuration error: {exc}") from exc

    detector = LanguageDetector(max_depth=max_depth)
    try:
        if patterns:
            if len(targets) > 1:
                raise typer.BadParameter("--pattern requires at most one directory argument")
            info, _ = detector.detect_with_patterns(targets[0] if targets else Path.cwd(), patterns)
        else:
            info, _ = detector.detect(targets)
    except DetectionError as exc:
        raise _abort(state, str(exc)) from exc
    render_project_info(info, config.style)


@app.command()
def check(
    ctx: typer.Context,
    paths: PathsArgument = None,
    git_modified: GitModifiedOption = False,
    tools: ToolsOption = None,
    tool_types: TypeOption = None,
    explicit: ExplicitOption = False,
    auto_fix: Annotated[
        bool,
        typer.Option("--auto-fix", "-a", help="Let linters that support it apply safe fixes."),
    ] = False,
) -> None:
    """Run linters, type checkers and formatters in check mode."""

    state = state_from(ctx)
    selection = SelectionOptions.from_cli(
        paths, git_modified=git_modified, tools=tools, types=tool_types, explicit=explicit
    )
    runtime = _runtime(state, selection)

    def adjust(tool: LintTool, config: ToolConfig) -> ToolConfig:
        if tool.tool_type is ToolType.FORMATTER:
            return config.model_copy(update={"check": True})
        if auto_fix and tool.tool_type is ToolType.LINTER:
            return config.model_copy(update={"auto_fix": True})
        return config

    selected = select_tools(
        runtime,
        selection,
        (ToolType.LINTER, ToolType.TYPECHECKER, ToolType.FORMATTER),
    )
    batch = run_stage(runtime, "Checking", selected, adjust)
    _finish(runtime, [batch])


@app.command("format")
def format_command(
    ctx: typer.Context,
    paths: PathsArgument = None,
    git_modified: GitModifiedOption = False,
    tools: ToolsOption = None,
    explicit: ExplicitOption = False,
    check_only: CheckOption = False,
) -> None:
    """Format files with the best available formatter per language."""

    state = state_from(ctx)
    selection = SelectionOptions.from_cli(paths, git_modified=git_modified, tools=tools, types=None, explicit=explicit)
    runtime = _runtime(state, selection)
    selected = select_tools(runtime, selection, (ToolType.FORMATTER,))
    batch = run_stage(
        runtime,
        "Checking formatting" if check_only else "Formatting",
        selected,
        lambda tool, config: config.model_copy(update={"check": check_only}),
    )
    _finish(runtime, [batch])


@app.command()
def fix(
    ctx: typer.Context,
    paths: PathsArgument = None,
    git_modified: GitModifiedOption = False,
    tools: ToolsOption = None,
    explicit: ExplicitOption = False,
    run_format: Annotated[
        bool,
        typer.Option("--format/--no-format", help="Run formatters before the fixers."),
    ] = True,
    check_after: CheckOption = False,
) -> None:
    """Apply automatic fixes, optionally followed by a verification check."""

    state = state_from(ctx)
    selection = SelectionOptions.from_cli(paths, git_modified=git_modified, tools=tools, types=None, explicit=explicit)
    runtime = _runtime(state, selection)
    batches: list[BatchResult] = []

    if run_format:
        formatters = select_tools(runtime, selection, (ToolType.FORMATTER,))
        if formatters:
            batches.append(run_stage(runtime, "Formatting", formatters, _write_mode))

    fixers = select_tools(runtime, selection, (ToolType.FIXER, ToolType.LINTER), predicate=_can_fix)
    batches.append(run_stage(runtime, "Fixing", fixers, _fixing))

    if check_after:
        checkers = select_tools(runtime, selection, (ToolType.LINTER, ToolType.TYPECHECKER, ToolType.FORMATTER))
        batches.append(run_stage(runtime, "Verifying", checkers, _check_mode))
    _finish(runtime, batches)


@app.command("tools")
def tools_command(
    ctx: typer.Context,
    language: Annotated[
        Language | None,
        typer.Option("--language", "-l", help="Only list tools supporting this language.", case_sensitive=False),
    ] = None,
    tool_type: Annotated[
        ToolType | None,
        typer.Option("--type", "-t", help="Only list tools of this type.", case_sensitive=False),
    ] = None,
    available_only: Annotated[
        bool,
        typer.Option("--available", "-a", help="Only list tools whose executable was found."),
    ] = False,
) -> None:
    """List registered tools with their availability and version."""

    state = state_from(ctx)
    try:
        config = load_cli_config(state, Path.cwd())
    except ConfigError as exc:
        raise _abort(state, f"Configuration error: {exc}") from exc
    registry = state.get_registry()
    if language is not None and tool_type is not None:
        selected = registry.for_language_and_type(language, tool_type)
    elif language is not None:
        selected = registry.for_language(language)
    elif tool_type is not None:
        selected = registry.for_type(tool_type)
    else:
        selected = registry.all()
    infos = [describe_tool(tool) for tool in selected]
    if available_only:
        infos = [entry for entry in infos if entry.available]
    render_tool_info(infos, config.style)


__all__ = ["app"]
