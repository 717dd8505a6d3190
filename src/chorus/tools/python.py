# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Python tool wrappers: ruff, black, pylint and mypy."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from ..languages import Language
from ..models import LintIssue, ToolConfig, ToolType
from .base import CommandTool
from .parsers import formatting_issue, parse_mypy, parse_pylint, parse_ruff, parse_would_reformat

PYTHON_EXTENSIONS: Final[frozenset[str]] = frozenset({"py", "pyi"})
_PYTHON: Final[frozenset[Language]] = frozenset({Language.PYTHON})


def is_valid_python_module(path: Path) -> bool:
    """Return ``False`` when ``path`` sits inside a package with an unimportable name.

    Every enclosing directory that carries an ``__init__.py`` must be a valid
    identifier; ``my-app/__init__.py`` makes the whole package invalid for
    import-aware tools.
    """

    if path.suffix.lower().lstrip(".") not in PYTHON_EXTENSIONS:
        return False
    directory = path.absolute().parent
    while (directory / "__init__.py").is_file():
        if not directory.name.isidentifier():
            return False
        if directory.parent == directory:
            break
        directory = directory.parent
    return True


def _formatting_fallback(completed: CompletedProcess[str], files: Sequence[Path]) -> list[LintIssue]:
    """Return issues for a check run that exited 1 without naming files."""

    if completed.returncode != 1:
        return []
    if len(files) == 1:
        return [formatting_issue(files[0])]
    return [formatting_issue(None, message="Files need formatting")]


class Ruff(CommandTool):
    """Fast Python linter; applies safe fixes when ``auto_fix`` is set."""

    name = "ruff"
    description = "An extremely fast Python linter"
    tool_type = ToolType.LINTER
    languages = _PYTHON
    priority = 20
    executable = "ruff"
    extensions = PYTHON_EXTENSIONS
    line_length_option = "--line-length"
    ignore_option = "--ignore"
    enable_option = "--extend-select"
    supports_fix = True
    accepts_directories = True

    def can_handle(self, path: Path) -> bool:
        return super().can_handle(path) and is_valid_python_module(path)

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        args = ["check", "--output-format=concise", "--no-cache"]
        if config.auto_fix:
            args.append("--fix")
        return args

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        return parse_ruff(completed.stdout)


class RuffFormat(CommandTool):
    """ruff's black-compatible formatter."""

    name = "ruff-format"
    description = "Python code formatter built into ruff"
    tool_type = ToolType.FORMATTER
    languages = _PYTHON
    priority = 20
    executable = "ruff"
    extensions = PYTHON_EXTENSIONS
    line_length_option = "--line-length"
    accepts_directories = True

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        return ["format", "--check"] if config.check else ["format"]

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        if not config.check:
            return []
        return parse_would_reformat(completed.stdout, completed.stderr) or _formatting_fallback(completed, files)


class Black(CommandTool):
    """The uncompromising Python code formatter."""

    name = "black"
    description = "The uncompromising Python code formatter"
    tool_type = ToolType.FORMATTER
    languages = _PYTHON
    priority = 10
    executable = "black"
    extensions = frozenset({"py", "pyi", "pyx"})
    line_length_option = "--line-length"
    default_line_length: Final[int] = 88
    accepts_directories = True

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        args = ["--check"] if config.check else []
        if not any(arg.startswith(("--line-length", "-l")) for arg in config.extra_args):
            args.extend(["--line-length", str(self.default_line_length)])
        return args

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        if not config.check:
            return []
        return parse_would_reformat(completed.stderr, completed.stdout) or _formatting_fallback(completed, files)


class Pylint(CommandTool):
    """Python static code analyser."""

    name = "pylint"
    description = "Python static code analysis tool"
    tool_type = ToolType.LINTER
    languages = _PYTHON
    priority = 5
    executable = "pylint"
    extensions = PYTHON_EXTENSIONS
    line_length_option = "--max-line-length"
    ignore_option = "--disable"
    enable_option = "--enable"
    message_template: Final[str] = "{path}:{line}:{column}: {msg_id}: {msg} ({symbol})"

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        return ["--output-format=text", "--score=n", "--reports=n", f"--msg-template={self.message_template}"]

    def interpret_exit(
        self, completed: CompletedProcess[str], issues: Sequence[LintIssue], config: ToolConfig
    ) -> bool:
        # Exit status is a bit mask: 1 fatal, 2 error, 4 warning, 8 refactor,
        # 16 convention, 32 usage error.
        returncode = completed.returncode
        if returncode > 0 and not returncode & (1 | 32):
            return True
        return super().interpret_exit(completed, issues, config)

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        return parse_pylint(completed.stdout)


class Mypy(CommandTool):
    """Optional static type checker for Python."""

    name = "mypy"
    description = "Optional static type checker for Python"
    tool_type = ToolType.TYPECHECKER
    languages = _PYTHON
    priority = 10
    executable = "mypy"
    extensions = PYTHON_EXTENSIONS
    accepts_directories = True

    def can_handle(self, path: Path) -> bool:
        return super().can_handle(path) and is_valid_python_module(path)

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        return ["--no-pretty", "--show-column-numbers", "--no-error-summary", "--no-color-output"]

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        return parse_mypy(completed.stdout)


__all__ = ["Black", "Mypy", "Pylint", "Ruff", "RuffFormat", "is_valid_python_module"]
