# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discovery of pre-existing tool configuration files."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from ..constants import TOOL_CONFIG_FILES
from ..languages import Language
from ..models import DetectedTool, ToolType


def detect_tool_configs(directory: Path) -> list[DetectedTool]:
    """Return tools whose configuration files live directly in ``directory``.

    For each known tool the candidate filenames are checked in order and
    only the first existing one is recorded.
    """

    detected: list[DetectedTool] = []
    for name, tool_type, language, filenames in TOOL_CONFIG_FILES:
        for filename in filenames:
            candidate = directory / filename
            if candidate.is_file():
                detected.append(
                    DetectedTool(
                        name=name,
                        config_path=candidate,
                        tool_type=ToolType(tool_type),
                        language=Language(language),
                    )
                )
                break
    return detected


def detect_tools_in_directories(directories: Iterable[Path]) -> list[DetectedTool]:
    """Return detected tools across ``directories`` deduplicated by ``(name, path)``."""

    seen: set[tuple[str, Path]] = set()
    detected: list[DetectedTool] = []
    for directory in directories:
        for tool in detect_tool_configs(directory):
            key = (tool.name, tool.config_path)
            if key in seen:
                continue
            seen.add(key)
            detected.append(tool)
    return detected


__all__ = ["detect_tool_configs", "detect_tools_in_directories"]
