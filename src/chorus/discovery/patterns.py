# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Glob-style pattern matching over discovered files."""

from __future__ import annotations

from collections.abc import Sequence
from fnmatch import fnmatchcase
from functools import lru_cache
from pathlib import Path

from .filesystem import FileLister, list_files

_RECURSIVE_PREFIX = "**/"


@lru_cache(maxsize=256)
def _pattern_variants(pattern: str) -> tuple[str, ...]:
    """Return ``pattern`` plus every form with some ``**/`` segments removed.

    ``fnmatch`` already lets ``*`` cross directory separators, so ``**/``
    matches one or more directories as written; dropping the segment covers
    the zero-directory case.
    """

    index = pattern.find(_RECURSIVE_PREFIX)
    if index < 0:
        return (pattern,)
    head = pattern[:index]
    variants: list[str] = []
    for tail in _pattern_variants(pattern[index + len(_RECURSIVE_PREFIX) :]):
        for candidate in (f"{head}{_RECURSIVE_PREFIX}{tail}", f"{head}{tail}"):
            if candidate not in variants:
                variants.append(candidate)
    return tuple(variants)


def matches_pattern(relative: str, pattern: str) -> bool:
    """Return ``True`` when the posix ``relative`` path matches ``pattern``.

    Args:
        relative: Path relative to the scan directory, using ``/`` separators.
        pattern: Glob pattern; ``*``, ``?``, ``[...]`` and ``**/`` are supported.

    Returns:
        bool: Whether the path matches.
    """

    normalized = pattern[2:] if pattern.startswith("./") else pattern
    return any(fnmatchcase(relative, variant) for variant in _pattern_variants(normalized))


def expand_patterns(
    directory: Path,
    patterns: Sequence[str],
    lister: FileLister = list_files,
) -> list[Path]:
    """Resolve ``patterns`` against ``directory``.

    A pattern that names an existing file (relative to ``directory`` or
    absolute) selects that file directly. A pattern naming an existing
    directory selects every listed file beneath it. Anything else is matched
    as a glob against the listed files of ``directory``.

    Args:
        directory: Base directory for relative patterns and glob matching.
        patterns: File names, directory names or glob patterns.
        lister: Collaborator returning the files beneath a directory.

    Returns:
        list[Path]: Matching files in pattern order, without duplicates.
    """

    base = directory.absolute()
    listed: list[Path] | None = None
    selected: list[Path] = []
    seen: set[Path] = set()

    def _add(path: Path) -> None:
        if path not in seen:
            seen.add(path)
            selected.append(path)

    for pattern in patterns:
        candidate = Path(pattern)
        if not candidate.is_absolute():
            candidate = base / candidate
        if candidate.is_file():
            _add(candidate)
            continue
        if candidate.is_dir():
            for path in lister(candidate):
                _add(path)
            continue
        if listed is None:
            listed = lister(base)
        for path in listed:
            try:
                relative = path.relative_to(base).as_posix()
            except ValueError:
                continue
            if matches_pattern(relative, pattern):
                _add(path)
    return selected


__all__ = ["expand_patterns", "matches_pattern"]
