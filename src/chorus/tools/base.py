# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool capability protocol and the subprocess-backed base implementation."""

from __future__ import annotations

import logging
import shlex
import threading
import time
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from textwrap import shorten
from typing import ClassVar, Protocol, runtime_checkable

from ..errors import ExecutionFailedError, ToolFailedError, ToolNotFoundError
from ..languages import Language, language_from_path
from ..models import LintIssue, LintResult, ToolConfig, ToolInfo, ToolType
from ..process import CommandOptions, CommandRunner, find_executable, first_output_line, run_command

LOGGER = logging.getLogger(__name__)

ExecutableResolver = Callable[[str], str | None]


@runtime_checkable
class LintTool(Protocol):
    """Capability contract every wrapped tool satisfies."""

    name: str
    description: str
    tool_type: ToolType
    languages: frozenset[Language]
    priority: int
    accepts_directories: bool

    def can_handle(self, path: Path) -> bool:
        """Return ``True`` when the tool should receive ``path``."""
        ...

    def execute(self, files: Sequence[Path], config: ToolConfig) -> LintResult:
        """Run the tool over ``files`` and return its result.

        Raises:
            ToolError: When the tool cannot run or fails outside its issue signal.
        """
        ...

    def is_available(self) -> bool:
        """Return ``True`` when the backing executable can be invoked."""
        ...

    def version(self) -> str | None:
        """Return the tool's version string, if it can be determined."""
        ...


def describe_tool(tool: LintTool) -> ToolInfo:
    """Return a :class:`ToolInfo` snapshot for ``tool``, probing availability."""

    available = tool.is_available()
    return ToolInfo(
        name=tool.name,
        description=tool.description,
        tool_type=tool.tool_type,
        languages=tuple(sorted(tool.languages, key=str)),
        priority=getattr(tool, "priority", 0),
        available=available,
        version=tool.version() if available else None,
    )


class CommandTool:
    """Base class for tools backed by a single external command.

    Subclasses declare their identity as class attributes and implement
    :meth:`arguments` and :meth:`parse_output`. The default :meth:`execute`
    runs one process for all files and maps the exit status onto a result:
    ``0`` is success, codes in :attr:`issue_exit_codes` mean "issues found",
    and anything else raises :class:`ToolFailedError`.

    Availability and version probes are memoised per instance.

    The optional ``*_option`` attributes name the flags that carry
    per-language line length and rule selections from the configuration.
    ``supports_fix`` marks linters that honour ``ToolConfig.auto_fix``.
    ``accepts_directories`` marks tools that recurse into directory arguments
    themselves, so a path manager may hand them collapsed directories.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    tool_type: ClassVar[ToolType]
    languages: ClassVar[frozenset[Language]]
    priority: ClassVar[int] = 0
    executable: ClassVar[str]
    version_args: ClassVar[tuple[str, ...]] = ("--version",)
    issue_exit_codes: ClassVar[frozenset[int]] = frozenset({1})
    extensions: ClassVar[frozenset[str] | None] = None
    line_length_option: ClassVar[str | None] = None
    ignore_option: ClassVar[str | None] = None
    enable_option: ClassVar[str | None] = None
    supports_fix: ClassVar[bool] = False
    accepts_directories: ClassVar[bool] = False

    def __init__(
        self,
        *,
        runner: CommandRunner = run_command,
        resolver: ExecutableResolver = find_executable,
    ) -> None:
        self._runner = runner
        self._resolver = resolver
        self._probe_lock = threading.Lock()
        self._available: bool | None = None
        self._version: str | None = None
        self._version_probed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    # Capability probes -------------------------------------------------

    def can_handle(self, path: Path) -> bool:
        if self.extensions is not None:
            return path.suffix.lower().lstrip(".") in self.extensions
        return language_from_path(path, sniff=False) in self.languages

    def is_available(self) -> bool:
        with self._probe_lock:
            if self._available is None:
                self._available = self._probe_available()
                LOGGER.debug("%s available: %s", self.name, self._available)
            return self._available

    def version(self) -> str | None:
        with self._probe_lock:
            if not self._version_probed:
                self._version = self._probe_version()
                self._version_probed = True
            return self._version

    def base_command(self) -> list[str]:
        """Return the leading arguments that invoke the tool."""

        return [self.executable]

    def _probe_available(self) -> bool:
        return self._resolver(self.base_command()[0]) is not None

    def _probe_version(self) -> str | None:
        try:
            completed = self._runner([*self.base_command(), *self.version_args], CommandOptions())
        except OSError:
            return None
        if completed.returncode != 0:
            return None
        return first_output_line(completed)

    # Invocation ----------------------------------------------------------

    def is_check_mode(self, config: ToolConfig) -> bool:
        """Return ``True`` when a non-zero issue exit should mark the run unsuccessful."""

        return self.tool_type is ToolType.FORMATTER and config.check

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        """Return tool-specific arguments placed before ``extra_args`` and files."""

        raise NotImplementedError

    def build_command(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        command = self.base_command()
        if config.executable_path is not None:
            command[0] = str(config.executable_path)
        return [*command, *self.arguments(files, config), *config.extra_args, *(str(path) for path in files)]

    def working_directory(self, files: Sequence[Path]) -> Path | None:
        return None

    def parse_output(
        self,
        completed: CompletedProcess[str],
        files: Sequence[Path],
        config: ToolConfig,
    ) -> Iterable[LintIssue]:
        """Translate captured output into issues."""

        raise NotImplementedError

    def run_process(self, command: Sequence[str], cwd: Path | None, config: ToolConfig) -> CompletedProcess[str]:
        """Run ``command`` and convert launch failures into tool errors.

        Raises:
            ToolNotFoundError: If the executable vanished since the availability probe.
            ExecutionFailedError: If the process could not be started.
        """

        options = CommandOptions(cwd=cwd, env=dict(config.env_vars) or None)
        try:
            return self._runner(command, options)
        except FileNotFoundError as exc:
            LOGGER.debug("%s: %s", self.name, exc)
            raise ToolNotFoundError(self.name) from exc
        except OSError as exc:
            raise ExecutionFailedError(self.name, f"failed to run {shlex.join(command)}: {exc}") from exc

    def execute(self, files: Sequence[Path], config: ToolConfig) -> LintResult:
        started = time.perf_counter()
        command = self.build_command(files, config)
        completed = self.run_process(command, self.working_directory(files), config)
        issues = tuple(self.parse_output(completed, files, config))
        success = self.interpret_exit(completed, issues, config)
        return LintResult(
            tool_name=self.name,
            success=success,
            issues=issues,
            execution_time=time.perf_counter() - started,
            stdout=completed.stdout or None,
            stderr=completed.stderr or None,
        )

    def interpret_exit(
        self,
        completed: CompletedProcess[str],
        issues: Sequence[LintIssue],
        config: ToolConfig,
    ) -> bool:
        """Return the ``success`` flag for ``completed`` or raise on real failures.

        Raises:
            ToolFailedError: If the exit status is neither zero nor an issue signal.
        """

        returncode = completed.returncode
        if returncode == 0:
            return True
        if returncode in self.issue_exit_codes:
            return not self.is_check_mode(config)
        raise ToolFailedError(self.name, returncode, failure_message(completed))


def failure_message(completed: CompletedProcess[str], width: int = 240) -> str:
    """Summarise a failed process's output for error messages."""

    text = (completed.stderr or "").strip() or (completed.stdout or "").strip()
    if not text:
        return "no output"
    return shorten(" ".join(text.split()), width=width, placeholder=" ...")


__all__ = [
    "CommandTool",
    "ExecutableResolver",
    "LintTool",
    "describe_tool",
    "failure_message",
]
