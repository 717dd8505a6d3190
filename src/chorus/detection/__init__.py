# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project detection: languages, frameworks and existing tool configs."""

from __future__ import annotations

from .detector import LanguageDetector
from .frameworks import detect_frameworks
from .tool_configs import detect_tool_configs, detect_tools_in_directories

__all__ = [
    "LanguageDetector",
    "detect_frameworks",
    "detect_tool_configs",
    "detect_tools_in_directories",
]
