# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Recursive, ignore-aware file listing."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

from ..constants import ALWAYS_EXCLUDE_DIRS
from .git import GitRunner, default_git_runner, git_list_files

FileLister = Callable[[Path], list[Path]]


def walk_files(root: Path, *, max_depth: int | None = None) -> Iterator[Path]:
    """Yield files beneath ``root`` in a stable, sorted order.

    Directories named in :data:`ALWAYS_EXCLUDE_DIRS` are pruned. Within each
    directory files are yielded before descending into subdirectories.

    Args:
        root: Directory to walk.
        max_depth: Maximum directory depth below ``root`` to descend into;
            ``None`` walks the whole tree and ``0`` lists only ``root`` itself.

    Yields:
        Path: Files found during the walk.
    """

    base = root.absolute()
    for dirpath, dirnames, filenames in os.walk(base):
        current = Path(dirpath)
        depth = len(current.relative_to(base).parts)
        if max_depth is not None and depth >= max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(name for name in dirnames if name not in ALWAYS_EXCLUDE_DIRS)
        for filename in sorted(filenames):
            yield current / filename


def list_files(root: Path, runner: GitRunner = default_git_runner) -> list[Path]:
    """Return every non-ignored file beneath ``root``.

    Inside a git work tree the listing honours ``.gitignore`` via
    ``git ls-files``; elsewhere a filtered directory walk is used. A file
    argument is returned as a single-element list.

    Args:
        root: File or directory to list.
        runner: Command runner used to execute git.

    Returns:
        list[Path]: Sorted absolute file paths.

    Raises:
        FileNotFoundError: If ``root`` does not exist.
    """

    base = root.absolute()
    if base.is_file():
        return [base]
    if not base.is_dir():
        raise FileNotFoundError(f"No such file or directory: {root}")
    tracked = git_list_files(base, runner)
    if tracked is not None:
        return [path for path in tracked if not _in_excluded_dir(path, base)]
    return sorted(walk_files(base))


def _in_excluded_dir(path: Path, base: Path) -> bool:
    return any(part in ALWAYS_EXCLUDE_DIRS for part in path.relative_to(base).parts[:-1])


__all__ = ["FileLister", "list_files", "walk_files"]
