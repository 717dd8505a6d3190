# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool capability contract, registry and built-in tool wrappers."""

from __future__ import annotations

from .base import CommandTool, LintTool, describe_tool
from .builtins import BUILTIN_TOOL_TYPES, build_default_registry
from .registry import ToolRegistry

__all__ = [
    "BUILTIN_TOOL_TYPES",
    "CommandTool",
    "LintTool",
    "ToolRegistry",
    "build_default_registry",
    "describe_tool",
]
