# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concurrent tool execution and batch results."""

from __future__ import annotations

from .executor import StateObserver, ToolExecutor, group_files_by_language
from .state import BatchResult, BatchStatus, ToolRun, ToolState

__all__ = [
    "BatchResult",
    "BatchStatus",
    "StateObserver",
    "ToolExecutor",
    "ToolRun",
    "ToolState",
    "group_files_by_language",
]
