# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""HTML template tooling via djlint."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from ..languages import Language
from ..models import LintIssue, ToolConfig, ToolType
from .base import CommandTool
from .parsers import formatting_issue, parse_djlint_lint

_HTML: Final[frozenset[Language]] = frozenset({Language.HTML})
_TEMPLATE_EXTENSIONS: Final[frozenset[str]] = frozenset({"html", "htm", "jinja", "jinja2", "j2", "hbs", "njk"})
_UPDATED_SUMMARY: Final[re.Pattern[str]] = re.compile(r"(\d+) files? would be updated", re.IGNORECASE)


class Djlint(CommandTool):
    """Lint HTML templates for Django, Jinja, Nunjucks and Handlebars."""

    name = "djlint"
    description = "HTML template linter with support for Django, Jinja, Nunjucks and Handlebars"
    tool_type = ToolType.LINTER
    languages = _HTML
    priority = 10
    executable = "djlint"
    extensions = _TEMPLATE_EXTENSIONS
    line_length_option = "--max-line-length"
    accepts_directories = True

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        return ["--lint"]

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        return parse_djlint_lint(completed.stdout, files)


class DjlintFormatter(CommandTool):
    """Reformat HTML templates with djlint."""

    name = "djlint-fmt"
    description = "HTML template formatter with support for Django, Jinja, Nunjucks and Handlebars"
    tool_type = ToolType.FORMATTER
    languages = _HTML
    priority = 10
    executable = "djlint"
    extensions = _TEMPLATE_EXTENSIONS
    line_length_option = "--max-line-length"
    accepts_directories = True

    def arguments(self, files: Sequence[Path], config: ToolConfig) -> list[str]:
        return ["--check"] if config.check else ["--reformat"]

    def interpret_exit(
        self, completed: CompletedProcess[str], issues: Sequence[LintIssue], config: ToolConfig
    ) -> bool:
        # ``--reformat`` exits 1 after rewriting files, which is not a failure.
        if not config.check and completed.returncode == 1:
            return True
        return super().interpret_exit(completed, issues, config)

    def parse_output(
        self, completed: CompletedProcess[str], files: Sequence[Path], config: ToolConfig
    ) -> Iterable[LintIssue]:
        if not config.check or completed.returncode != 1:
            return []
        match = _UPDATED_SUMMARY.search(completed.stdout or "")
        count = match.group(1) if match else "Some"
        suffix = "" if count == "1" else "s"
        return [formatting_issue(None, message=f"{count} file{suffix} would be reformatted")]


__all__ = ["Djlint", "DjlintFormatter"]
