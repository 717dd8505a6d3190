# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git-backed file listing."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from ..process import CommandOptions, SubprocessExecutionError, run_command

LOGGER = logging.getLogger(__name__)

GitRunner = Callable[[Sequence[str], Path], list[str] | None]

_LS_FILES_ALL = ("git", "ls-files", "-z", "--cached", "--others", "--exclude-standard")
_LS_FILES_MODIFIED = ("git", "ls-files", "-z", "--modified", "--others", "--exclude-standard")


def default_git_runner(cmd: Sequence[str], cwd: Path) -> list[str] | None:
    """Execute ``cmd`` in ``cwd`` and return NUL or newline separated entries.

    Args:
        cmd: Git command to execute.
        cwd: Directory the command runs in.

    Returns:
        list[str] | None: Output entries, or ``None`` when git is missing or
        the command failed (for example outside a work tree).
    """

    try:
        completed = run_command(cmd, CommandOptions(cwd=cwd, check=True))
    except FileNotFoundError:
        LOGGER.debug("git executable not found; falling back to filesystem walk")
        return None
    except SubprocessExecutionError as exc:
        LOGGER.debug("%s failed in %s with status %d", " ".join(cmd), cwd, exc.returncode)
        return None
    output = completed.stdout or ""
    separator = "\0" if "\0" in output else "\n"
    return [entry for entry in output.split(separator) if entry.strip()]


def is_work_tree(directory: Path, runner: GitRunner = default_git_runner) -> bool:
    """Return ``True`` when ``directory`` lies inside a git work tree."""

    output = runner(("git", "rev-parse", "--is-inside-work-tree"), directory)
    return bool(output) and output[0].strip() == "true"


def _collect(cmd: Sequence[str], directory: Path, runner: GitRunner) -> list[Path] | None:
    entries = runner(cmd, directory)
    if entries is None:
        return None
    seen: set[Path] = set()
    files: list[Path] = []
    for entry in entries:
        candidate = directory / entry.strip()
        if candidate in seen or not candidate.is_file():
            continue
        seen.add(candidate)
        files.append(candidate)
    return sorted(files)


def git_list_files(directory: Path, runner: GitRunner = default_git_runner) -> list[Path] | None:
    """Return tracked and untracked, non-ignored files beneath ``directory``.

    Returns:
        list[Path] | None: Sorted file list, or ``None`` outside a work tree.
    """

    if not is_work_tree(directory, runner):
        return None
    return _collect(_LS_FILES_ALL, directory, runner)


def list_modified_files(root: Path, runner: GitRunner = default_git_runner) -> list[Path]:
    """Return files git reports as modified or untracked beneath ``root``.

    ``root`` may be a file, in which case the result is that file when git
    reports it as modified and empty otherwise. Paths outside a work tree
    produce an empty list.

    Args:
        root: File or directory to inspect.
        runner: Command runner used to execute git.

    Returns:
        list[Path]: Sorted modified file paths.
    """

    base = root.absolute()
    directory = base.parent if base.is_file() else base
    if not is_work_tree(directory, runner):
        LOGGER.debug("%s is not inside a git work tree; no modified files", directory)
        return []
    files = _collect(_LS_FILES_MODIFIED, directory, runner) or []
    if base.is_file():
        return [path for path in files if path == base]
    return files


__all__ = [
    "GitRunner",
    "default_git_runner",
    "git_list_files",
    "is_work_tree",
    "list_modified_files",
]
