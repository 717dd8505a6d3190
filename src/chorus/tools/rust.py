# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rust tool wrappers: rustfmt and cargo clippy."""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from ..errors import ToolFailedError
from ..languages import Language
from ..models import LintIssue, LintResult, ToolConfig, ToolType
from .base import CommandTool, failure_message
from .parsers import formatting_issue, parse_cargo_short, parse_rustfmt_check

_RUST: Final[frozenset[Language]] = frozenset({Language.RUST})
_RUST_EXTENSIONS: Final[frozenset[str]] = frozenset({"rs"})
# cargo exits 101 when the crate fails to compile; clippy reports those as errors.
_CARGO_ERROR_EXIT: Final[int] = 101


def find_cargo_root(path: Path) -> Path | None:
    """Return the nearest directory at or above ``path`` holding ``Cargo.toml``."""

    start = path.absolute()
    candidates = (start, *start.parents) if start.is_dir() else tuple(start.parents)
    for candidate in candidates:
        if (candidate / "Cargo.toml").is_file():
            return candidate
    return None


class Rustfmt(CommandTool):
    """The Rust code formatter."""

    name = "rustfmt"
    description = "The Rust code formatter"
    tool_type = ToolType.FORMATTER
    languages = _RUST
    priority = 10
    executable = "rustfmt"
    extensions = _RUST_EXTENSIONS
    edition: Final[str] = "2021"

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        args = ["--check"] if config.check else []
        if not any(arg.startswith("--edition") for arg in config.extra_args):
            args.extend(["--edition", self.edition])
        return args

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        if not config.check or completed.returncode != 1:
            return []
        issues = parse_rustfmt_check(completed.stdout)
        if issues:
            return issues
        return [formatting_issue(path) for path in files] if len(files) == 1 else [formatting_issue(None)]


class Clippy(CommandTool):
    """Rust linter run through cargo, once per crate."""

    name = "clippy"
    description = "A collection of lints to catch common mistakes in Rust"
    tool_type = ToolType.LINTER
    languages = _RUST
    priority = 10
    executable = "cargo"
    extensions = _RUST_EXTENSIONS
    issue_exit_codes = frozenset({_CARGO_ERROR_EXIT})
    lint_args: Final[tuple[str, ...]] = ("--", "-W", "clippy::all")

    def base_command(self) -> list[str]:
        return ["cargo", "clippy"]

    def _probe_available(self) -> bool:
        return super()._probe_available() and self._probe_version() is not None

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        args = ["--message-format=short"]
        if config.auto_fix:
            args.extend(["--fix", "--allow-dirty", "--allow-staged"])
        return args

    def build_command(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        command = self.base_command()
        if config.executable_path is not None:
            command[0] = str(config.executable_path)
        return [*command, *self.arguments(files, config), *config.extra_args, *self.lint_args]

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        crate = find_cargo_root(files[0]) if files else None
        return parse_cargo_short(completed.stderr, crate)

    def crates(self, files: Sequence[Path]) -> dict[Path, list[Path]]:
        """Group ``files`` by the crate directory that owns them.

        Files outside any crate are grouped under the current directory.
        """

        grouped: dict[Path, list[Path]] = {}
        for path in files:
            root = find_cargo_root(path) or Path.cwd()
            grouped.setdefault(root, []).append(path)
        return grouped

    def execute(self, files: Sequence[Path], config: ToolConfig) -> LintResult:
        started = time.perf_counter()
        issues: list[LintIssue] = []
        stdout: list[str] = []
        stderr: list[str] = []
        for crate, crate_files in sorted(self.crates(files).items()):
            command = self.build_command(crate_files, config)
            completed = self.run_process(command, crate, config)
            if completed.returncode not in (0, *self.issue_exit_codes):
                raise ToolFailedError(self.name, completed.returncode, failure_message(completed))
            issues.extend(self.parse_output(completed, crate_files, config))
            stdout.append(completed.stdout or "")
            stderr.append(completed.stderr or "")
        return LintResult(
            tool_name=self.name,
            success=True,
            issues=tuple(issues),
            execution_time=time.perf_counter() - started,
            stdout="".join(stdout) or None,
            stderr="".join(stderr) or None,
        )


class ClippyFix(Clippy):
    """Apply clippy's machine-applicable suggestions."""

    name = "clippy-fix"
    description = "Automatically apply clippy suggestions"
    tool_type = ToolType.FIXER
    priority = 5

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        return ["--message-format=short", "--fix", "--allow-dirty", "--allow-staged"]


__all__ = ["Clippy", "ClippyFix", "Rustfmt", "find_cargo_root"]
