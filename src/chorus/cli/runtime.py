# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime assembly shared by the CLI commands: config, registry, paths and stages."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import typer

from ..config import ChorusConfig
from ..config_loader import ConfigLoader
from ..execution import BatchResult, ToolExecutor, ToolRun, ToolState
from ..logging import configure_logging, info, section, warn
from ..models import ToolConfig, ToolType
from ..paths import PathManager, PathMode, common_root
from ..reporting import render_batch
from ..tools import LintTool, ToolRegistry, build_default_registry
from .options import GlobalOptions, SelectionOptions

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ISSUES = 1
EXIT_USAGE = 2

ConfigAdjuster = Callable[[LintTool, ToolConfig], ToolConfig]


@dataclass(slots=True)
class CLIState:
    """Per-invocation state stored on the Typer context object.

    Tests pre-populate ``registry`` through ``CliRunner.invoke(..., obj=...)``
    to substitute fake tools.
    """

    options: GlobalOptions = field(default_factory=GlobalOptions)
    registry: ToolRegistry | None = None
    config: ChorusConfig | None = None

    def get_registry(self) -> ToolRegistry:
        if self.registry is None:
            self.registry = build_default_registry()
        return self.registry


@dataclass(slots=True)
class Runtime:
    """Resolved inputs for one running command."""

    state: CLIState
    config: ChorusConfig
    registry: ToolRegistry
    manager: PathManager
    files: list[Path]
    root: Path

    @property
    def use_emoji(self) -> bool:
        return self.config.style.use_emoji

    @property
    def use_color(self) -> bool:
        return self.config.style.use_color

    def info(self, message: str) -> None:
        info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        warn(message, use_emoji=self.use_emoji, use_color=self.use_color)


def state_from(ctx: typer.Context) -> CLIState:
    if not isinstance(ctx.obj, CLIState):
        ctx.obj = CLIState()
    return ctx.obj


def load_cli_config(state: CLIState, root: Path) -> ChorusConfig:
    """Load the configuration for ``root`` and apply the global CLI overrides.

    Raises:
        ConfigError: If a configuration file is invalid.
    """

    options = state.options
    config = state.config
    if config is None:
        config = ConfigLoader.for_root(root, project_config=options.config_path).load()
    style: dict[str, bool] = {}
    if options.no_emoji:
        style["use_emoji"] = False
    if options.no_color:
        style["use_color"] = False
    general = {"jobs": options.jobs} if options.jobs is not None else {}
    return config.model_copy(
        update={
            "style": config.style.model_copy(update=style),
            "general": config.general.model_copy(update=general),
        }
    )


def build_runtime(state: CLIState, selection: SelectionOptions) -> Runtime:
    """Collect files and load configuration for a running command.

    Raises:
        ConfigError: If a configuration file is invalid.
        FileNotFoundError: If an input path does not exist.
    """

    configure_logging(state.options.verbose)
    mode = PathMode.EXPLICIT if selection.explicit else PathMode.DISCOVERED
    manager = PathManager(mode)
    files = manager.collect(selection.paths, modified_only=selection.git_modified)
    inputs = [path.absolute() for path in selection.paths] or [Path.cwd()]
    root = common_root(path if path.is_dir() else path.parent for path in inputs)
    config = load_cli_config(state, root)
    LOGGER.debug("collected %d files under %s", len(files), root)
    return Runtime(
        state=state,
        config=config,
        registry=state.get_registry(),
        manager=manager,
        files=files,
        root=root,
    )


def select_tools(
    runtime: Runtime,
    selection: SelectionOptions,
    types: Sequence[ToolType],
    *,
    best_formatter_only: bool = True,
    predicate: Callable[[LintTool], bool] | None = None,
) -> list[LintTool]:
    """Choose the tools a command dispatches.

    With ``--tools`` the named tools are used as given, so a missing binary
    surfaces as a not-found error. Otherwise tools are drawn from the
    registry for the collected languages, unavailable tools are dropped with
    a warning, and only the highest-priority formatter per language is kept.

    Raises:
        typer.BadParameter: If ``--tools`` names an unknown tool.
    """

    wanted_types = [kind for kind in types if not selection.types or kind in selection.types]
    registry = runtime.registry
    if selection.tools:
        unknown = [name for name in selection.tools if name not in registry]
        if unknown:
            choices = ", ".join(registry.names())
            raise typer.BadParameter(f"unknown tool(s): {', '.join(unknown)} (available: {choices})")
        chosen = [registry[name] for name in selection.tools]
        return [tool for tool in chosen if tool.tool_type in wanted_types and (predicate is None or predicate(tool))]

    languages = runtime.manager.languages()
    selected: list[LintTool] = []
    for tool_type in wanted_types:
        for language in languages:
            candidates = [
                tool
                for tool in registry.for_language_and_type(language, tool_type)
                if predicate is None or predicate(tool)
            ]
            if tool_type is ToolType.FORMATTER and best_formatter_only:
                candidates = _best_available(candidates)
            for tool in candidates:
                if tool in selected:
                    continue
                if not tool.is_available():
                    runtime.warn(f"Skipping unavailable {tool_type}: {tool.name}")
                    continue
                selected.append(tool)
    return selected


def _best_available(candidates: list[LintTool]) -> list[LintTool]:
    available = [tool for tool in candidates if tool.is_available()]
    if not available:
        return candidates[:1]
    return [max(available, key=lambda tool: getattr(tool, "priority", 0))]


def run_stage(
    runtime: Runtime,
    title: str,
    tools: Sequence[LintTool],
    adjust: ConfigAdjuster | None = None,
) -> BatchResult:
    """Run ``tools`` over the collected files and render the batch."""

    config = runtime.config
    configs: dict[str, ToolConfig] = {}
    for tool in tools:
        resolved = config.resolve(tool)
        configs[tool.name] = adjust(tool, resolved) if adjust is not None else resolved

    def observe(name: str, state: ToolState) -> None:
        if state is ToolState.RUNNING:
            LOGGER.debug("%s: running", name)
        elif state.is_terminal:
            LOGGER.debug("%s: finished (%s)", name, state.value)

    executor = ToolExecutor(
        config.general.effective_jobs,
        path_manager=runtime.manager,
        observer=observe,
    )
    section(title, use_color=runtime.use_color)
    runtime.info(f"{len(tools)} tool(s), {len(runtime.files)} file(s)")
    batch = executor.run(list(tools), runtime.files, configs)
    render_batch(batch, config, root=runtime.root)
    return batch


def exit_code_for(batches: Sequence[BatchResult], config: ChorusConfig) -> int:
    """Return ``1`` when any tool errored or any issue reaches ``fail_level``."""

    for batch in batches:
        if batch.has_errors or batch.exceeds(config.general.fail_level):
            return EXIT_ISSUES
        if any(_failed_check(run) for run in batch):
            return EXIT_ISSUES
    return EXIT_OK


def _failed_check(run: ToolRun) -> bool:
    # A check-mode formatter reports unformatted files as an unsuccessful result.
    return run.result is not None and not run.result.success


__all__ = [
    "CLIState",
    "EXIT_ISSUES",
    "EXIT_OK",
    "EXIT_USAGE",
    "Runtime",
    "build_runtime",
    "exit_code_for",
    "load_cli_config",
    "run_stage",
    "select_tools",
    "state_from",
]
