# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in tool catalogue."""

from __future__ import annotations

from ..process import CommandRunner, find_executable, run_command
from .base import CommandTool, ExecutableResolver
from .html import Djlint, DjlintFormatter
from .javascript import Eslint, Prettier, TypeScript
from .python import Black, Mypy, Pylint, Ruff, RuffFormat
from .registry import ToolRegistry
from .rust import Clippy, ClippyFix, Rustfmt

BUILTIN_TOOL_TYPES: tuple[type[CommandTool], ...] = (
    Rustfmt,
    Clippy,
    ClippyFix,
    Ruff,
    RuffFormat,
    Black,
    Pylint,
    Mypy,
    Eslint,
    Prettier,
    TypeScript,
    Djlint,
    DjlintFormatter,
)


def build_default_registry(
    *,
    runner: CommandRunner = run_command,
    resolver: ExecutableResolver = find_executable,
) -> ToolRegistry:
    """Return a registry populated with every built-in tool.

    Args:
        runner: Command runner shared by the built-in tools.
        resolver: Executable lookup used by availability probes.

    Returns:
        ToolRegistry: Registry holding one instance of each built-in tool.
    """

    return ToolRegistry(tool_type(runner=runner, resolver=resolver) for tool_type in BUILTIN_TOOL_TYPES)


__all__ = ["BUILTIN_TOOL_TYPES", "build_default_registry"]
