# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concurrent dispatch of lint tools over a file set."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from ..config import default_parallel_jobs
from ..errors import ExecutionFailedError, ToolError, ToolFailedError, ToolNotFoundError
from ..languages import Language, language_from_path
from ..models import LintResult, ToolConfig, ToolType
from ..paths import PathManager
from ..process import find_executable
from ..tools.base import LintTool
from .state import BatchResult, BatchStatus, ToolRun, ToolState

LOGGER = logging.getLogger(__name__)

StateObserver = Callable[[str, ToolState], None]


@dataclass(frozen=True, slots=True)
class _Scheduled:
    order: int
    tool: LintTool
    config: ToolConfig


def group_files_by_language(files: Sequence[Path]) -> dict[Language, list[Path]]:
    """Group ``files`` by extension-derived language, dropping unknown files.

    Keys appear in first-seen order.
    """

    groups: dict[Language, list[Path]] = {}
    for path in files:
        language = language_from_path(path, sniff=False)
        if language is not None:
            groups.setdefault(language, []).append(path)
    return groups


def _error_state(error: ToolError) -> ToolState:
    if isinstance(error, ToolNotFoundError):
        return ToolState.NOT_FOUND
    if isinstance(error, ToolFailedError):
        return ToolState.TOOL_FAILED
    return ToolState.EXECUTION_FAILED


class ToolExecutor:
    """Run tools concurrently and collect their outcomes in submission order.

    Each tool is one unit of work on a thread pool sized by ``jobs``. A tool
    error never aborts the batch: it is recorded against the tool that raised
    it. There are no timeouts, cancellation or retries.

    Args:
        jobs: Worker count; defaults to 75% of the CPU cores, minimum 1.
        path_manager: When given, each tool receives
            :meth:`PathManager.get_optimized_paths_for_tool` for the batch's
            files instead of the files it can handle.
        observer: Callback notified of every state transition. Exceptions it
            raises are logged and do not affect the batch.
    """

    def __init__(
        self,
        jobs: int | None = None,
        *,
        path_manager: PathManager | None = None,
        observer: StateObserver | None = None,
    ) -> None:
        if jobs is not None and jobs < 1:
            raise ValueError("jobs must be at least 1")
        self.jobs = jobs if jobs is not None else default_parallel_jobs()
        self._path_manager = path_manager
        self._observer = observer

    def run(
        self,
        tools: Sequence[LintTool],
        files: Sequence[Path],
        configs: Mapping[str, ToolConfig] | None = None,
    ) -> BatchResult:
        """Run ``tools`` over ``files``.

        Args:
            tools: Tools to dispatch; the sequence order is the result order.
            files: Candidate files; each tool only receives those it can handle.
            configs: Per-tool settings keyed by tool name; missing entries use
                :class:`ToolConfig` defaults.

        Returns:
            BatchResult: One :class:`ToolRun` per tool, in submission order.
        """

        if not tools:
            LOGGER.debug("no tools to run")
            return BatchResult(status=BatchStatus.NO_TOOLS)
        if not files:
            LOGGER.debug("no files to process")
            return BatchResult(status=BatchStatus.NO_FILES)

        configs = configs or {}
        scheduled = [
            _Scheduled(order=order, tool=tool, config=configs.get(tool.name, ToolConfig()))
            for order, tool in enumerate(tools)
        ]
        for item in scheduled:
            self._notify(item.tool.name, ToolState.PENDING)

        runner = partial(self._run_one, files=list(files))
        if self.jobs == 1 or len(scheduled) == 1:
            runs = [runner(item) for item in scheduled]
        else:
            runs = []
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                future_map = {executor.submit(runner, item): item for item in scheduled}
                for future in as_completed(future_map):
                    runs.append(future.result())
            runs.sort(key=lambda run: run.order)
        return BatchResult(runs=tuple(runs), status=BatchStatus.COMPLETED)

    def _notify(self, name: str, state: ToolState) -> None:
        if self._observer is None:
            return
        try:
            self._observer(name, state)
        except Exception:  # noqa: BLE001
            LOGGER.warning("state observer failed for %s (%s)", name, state.value, exc_info=True)

    def _finish(
        self,
        item: _Scheduled,
        state: ToolState,
        *,
        result: LintResult | None = None,
        error: ToolError | None = None,
    ) -> ToolRun:
        self._notify(item.tool.name, state)
        return ToolRun(order=item.order, tool_name=item.tool.name, state=state, result=result, error=error)

    def _run_one(self, item: _Scheduled, *, files: list[Path]) -> ToolRun:
        tool, config = item.tool, item.config
        if not config.enabled:
            LOGGER.debug("%s disabled; skipping", tool.name)
            return self._finish(item, ToolState.SKIPPED_DISABLED, result=LintResult.skipped(tool.name))

        if self._path_manager is not None:
            arguments = self._path_manager.get_optimized_paths_for_tool(tool, files)
        else:
            arguments = [path for path in files if tool.can_handle(path)]
        if not arguments:
            LOGGER.debug("%s has no applicable files; skipping", tool.name)
            return self._finish(item, ToolState.SKIPPED_NO_FILES, result=LintResult.skipped(tool.name))

        if not self._is_available(tool, config):
            return self._finish(item, ToolState.NOT_FOUND, error=ToolNotFoundError(tool.name))

        self._notify(tool.name, ToolState.RUNNING)
        started = time.perf_counter()
        try:
            result = tool.execute(arguments, config)
        except ToolError as exc:
            LOGGER.debug("%s raised %s", tool.name, exc)
            return self._finish(item, _error_state(exc), error=exc)
        except Exception as exc:  # noqa: BLE001
            LOGGER.debug("%s crashed", tool.name, exc_info=True)
            error = ExecutionFailedError(tool.name, f"{type(exc).__name__}: {exc}")
            return self._finish(item, ToolState.EXECUTION_FAILED, error=error)

        result = result.with_execution_time(time.perf_counter() - started)
        if config.report_level is not None:
            result = result.with_issues(result.issues_at_least(config.report_level))
        return self._finish(item, ToolState.SUCCESS, result=result)

    @staticmethod
    def _is_available(tool: LintTool, config: ToolConfig) -> bool:
        if config.executable_path is not None:
            return find_executable(str(config.executable_path)) is not None
        return tool.is_available()

    # Convenience runners ---------------------------------------------------

    def run_filtered(
        self,
        tools: Sequence[LintTool],
        files: Sequence[Path],
        predicate: Callable[[LintTool], bool],
        configs: Mapping[str, ToolConfig] | None = None,
    ) -> BatchResult:
        """Run the tools accepted by ``predicate``."""

        return self.run([tool for tool in tools if predicate(tool)], files, configs)

    def run_for_language(
        self,
        tools: Sequence[LintTool],
        files: Sequence[Path],
        language: Language,
        configs: Mapping[str, ToolConfig] | None = None,
    ) -> BatchResult:
        return self.run_filtered(tools, files, lambda tool: language in tool.languages, configs)

    def run_for_type(
        self,
        tools: Sequence[LintTool],
        files: Sequence[Path],
        tool_type: ToolType,
        configs: Mapping[str, ToolConfig] | None = None,
    ) -> BatchResult:
        return self.run_filtered(tools, files, lambda tool: tool.tool_type == tool_type, configs)

    def run_for_language_and_type(
        self,
        tools: Sequence[LintTool],
        files: Sequence[Path],
        language: Language,
        tool_type: ToolType,
        configs: Mapping[str, ToolConfig] | None = None,
    ) -> BatchResult:
        return self.run_filtered(
            tools,
            files,
            lambda tool: language in tool.languages and tool.tool_type == tool_type,
            configs,
        )

    def run_for_files(
        self,
        tools: Sequence[LintTool],
        files: Sequence[Path],
        configs: Mapping[str, ToolConfig] | None = None,
    ) -> dict[Language, BatchResult]:
        """Run, per language present in ``files``, the tools supporting that language.

        Returns:
            dict[Language, BatchResult]: One batch per language, in first-seen order.
        """

        return {
            language: self.run_for_language(tools, group, language, configs)
            for language, group in group_files_by_language(files).items()
        }


__all__ = ["StateObserver", "ToolExecutor", "group_files_by_language"]
