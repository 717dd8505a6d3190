# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""File discovery collaborators used by detection and path management."""

from __future__ import annotations

from .filesystem import FileLister, list_files, walk_files
from .git import GitRunner, default_git_runner, is_work_tree, list_modified_files
from .patterns import expand_patterns, matches_pattern

__all__ = [
    "FileLister",
    "GitRunner",
    "default_git_runner",
    "expand_patterns",
    "is_work_tree",
    "list_files",
    "list_modified_files",
    "matches_pattern",
    "walk_files",
]
