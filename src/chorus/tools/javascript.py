# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""JavaScript and TypeScript tool wrappers run through ``npx``."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import ClassVar, Final

from ..languages import Language
from ..models import LintIssue, ToolConfig, ToolType
from .base import CommandTool
from .parsers import formatting_issue, parse_eslint_unix, parse_prettier_check, parse_tsc

_JS_FAMILY: Final[frozenset[Language]] = frozenset({Language.JAVASCRIPT, Language.TYPESCRIPT})
_SCRIPT_EXTENSIONS: Final[frozenset[str]] = frozenset({"js", "jsx", "mjs", "cjs", "ts", "tsx"})


class NpxTool(CommandTool):
    """Tool resolved through ``npx`` from the project's ``node_modules``.

    Availability requires both ``npx`` on ``PATH`` and a successful version
    probe, so a missing package is reported as not found.
    """

    executable = "npx"
    package: ClassVar[str]

    def base_command(self) -> list[str]:
        return ["npx", "--no-install", self.package]

    def _probe_available(self) -> bool:
        return super()._probe_available() and self._probe_version() is not None

    def build_command(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        command = self.base_command()
        if config.executable_path is not None:
            # An explicit binary replaces the npx launcher and package name.
            command = [str(config.executable_path)]
        return [*command, *self.arguments(files, config), *config.extra_args, *(str(path) for path in files)]


class Eslint(NpxTool):
    """Pluggable JavaScript and TypeScript linter."""

    name = "eslint"
    description = "Find and fix problems in JavaScript code"
    tool_type = ToolType.LINTER
    languages = _JS_FAMILY
    priority = 10
    package = "eslint"
    extensions = _SCRIPT_EXTENSIONS
    supports_fix = True
    accepts_directories = True

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        args = ["--format", "unix"]
        if config.auto_fix:
            args.append("--fix")
        return args

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        return parse_eslint_unix(completed.stdout)


class Prettier(NpxTool):
    """Opinionated formatter for web languages."""

    name = "prettier"
    description = "Opinionated code formatter for JavaScript, TypeScript, CSS and more"
    tool_type = ToolType.FORMATTER
    languages = frozenset(
        {
            Language.JAVASCRIPT,
            Language.TYPESCRIPT,
            Language.CSS,
            Language.JSON,
            Language.YAML,
            Language.MARKDOWN,
        }
    )
    priority = 10
    package = "prettier"
    line_length_option = "--print-width"
    extensions = frozenset(
        {*_SCRIPT_EXTENSIONS, "css", "scss", "less", "json", "md", "markdown", "yaml", "yml", "vue", "graphql"}
    )
    accepts_directories = True

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        return ["--check"] if config.check else ["--write"]

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        if not config.check or completed.returncode != 1:
            return []
        issues = parse_prettier_check(completed.stdout, completed.stderr)
        return issues or [formatting_issue(None, message="Code style issues found")]


class TypeScript(NpxTool):
    """TypeScript compiler used as a type checker."""

    name = "tsc"
    description = "TypeScript type checker"
    tool_type = ToolType.TYPECHECKER
    languages = frozenset({Language.TYPESCRIPT})
    priority = 10
    package = "tsc"
    extensions = frozenset({"ts", "tsx"})
    # tsc exits 1 or 2 depending on whether output was emitted alongside errors.
    issue_exit_codes = frozenset({1, 2})

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        return ["--noEmit", "--pretty", "false"]

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        return parse_tsc(completed.stdout)


__all__ = ["Eslint", "NpxTool", "Prettier", "TypeScript"]
