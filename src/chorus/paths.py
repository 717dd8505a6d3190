# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project-root-aware grouping of files and per-tool argument lists."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .constants import PROJECT_MARKERS
from .discovery import FileLister, list_files, list_modified_files
from .languages import Language, language_from_extension
from .models import PathContext
from .tools.base import LintTool

LOGGER = logging.getLogger(__name__)

KIND_MARKER = "marker"
KIND_FALLBACK = "fallback"

_ANY_MARKERS: tuple[str, ...] = tuple(dict.fromkeys(name for names in PROJECT_MARKERS.values() for name in names))


class PathMode(str, Enum):
    """How a :class:`PathManager` treats its inputs."""

    EXPLICIT = "explicit"
    DISCOVERED = "discovered"


@dataclass(slots=True)
class _ContextBuilder:
    root: Path
    kind: str
    marker: str | None = None
    files: list[Path] = field(default_factory=list)
    counts: dict[Language, int] = field(default_factory=dict)

    def add(self, path: Path, language: Language | None) -> None:
        self.files.append(path)
        if language is not None:
            self.counts[language] = self.counts.get(language, 0) + 1

    def build(self) -> PathContext:
        dominant = max(self.counts, key=lambda language: self.counts[language]) if self.counts else None
        metadata = {"kind": self.kind, "languages": ",".join(sorted(language.value for language in self.counts))}
        if self.marker is not None:
            metadata["marker"] = self.marker
        return PathContext(root=self.root, files=tuple(self.files), language=dominant, metadata=metadata)


def common_root(paths: Iterable[Path]) -> Path:
    """Return the component-wise common ancestor of ``paths``.

    Falls back to the filesystem root of the first path when the paths share
    nothing beyond it, or live on different drives.
    """

    candidates = [str(path) for path in paths]
    if not candidates:
        return Path(Path.cwd().anchor)
    try:
        return Path(os.path.commonpath(candidates))
    except ValueError:
        return Path(Path(candidates[0]).anchor)


class PathManager:
    """Collect files and organise them into disjoint :class:`PathContext` groups.

    In :attr:`PathMode.EXPLICIT` mode the input paths are kept verbatim: no
    expansion, one context, and no argument optimisation. In
    :attr:`PathMode.DISCOVERED` mode directories are expanded through the
    lister, files are indexed by extension and language, and contexts are
    built from the nearest enclosing project marker.

    Args:
        mode: Operating mode, fixed for the lifetime of the manager.
        lister: Collaborator returning the non-ignored files under a directory.
        modified_lister: Collaborator returning files modified per version control.
    """

    def __init__(
        self,
        mode: PathMode = PathMode.DISCOVERED,
        *,
        lister: FileLister = list_files,
        modified_lister: FileLister = list_modified_files,
    ) -> None:
        self.mode = mode
        self._lister = lister
        self._modified_lister = modified_lister
        self._reset()

    def _reset(self) -> None:
        self._files: list[Path] = []
        self._roots: list[Path] = []
        self._by_language: dict[Language, list[Path]] = {}
        self._by_extension: dict[str, list[Path]] = {}
        self._language_of: dict[Path, Language | None] = {}
        self._contexts: list[PathContext] = []
        self._marker_cache: dict[tuple[Path, tuple[str, ...]], tuple[Path, str] | None] = {}

    @property
    def is_explicit(self) -> bool:
        return self.mode is PathMode.EXPLICIT

    def collect(self, paths: Sequence[Path] = (), *, modified_only: bool = False) -> list[Path]:
        """Collect ``paths`` and rebuild the indexes and contexts.

        Args:
            paths: Files and directories to process. In discovered mode an
                empty sequence scans the current directory.
            modified_only: In discovered mode, keep only files the version
                control lister reports as modified or untracked.

        Returns:
            list[Path]: The collected files, as :meth:`get_all_files` reports them.

        Raises:
            FileNotFoundError: In discovered mode, if an input path does not exist.
        """

        self._reset()
        if self.is_explicit:
            for path in paths:
                self._insert(path)
            if self._files:
                root = common_root(path.absolute().parent for path in self._files)
                builder = _ContextBuilder(root=root, kind=KIND_FALLBACK)
                for path in self._files:
                    builder.add(path, self._language_of[path])
                self._contexts = [builder.build()]
            return self.get_all_files()

        inputs = [path.absolute() for path in paths] or [Path.cwd()]
        lister = self._modified_lister if modified_only else self._lister
        for path in inputs:
            if not path.exists():
                raise FileNotFoundError(f"No such file or directory: {path}")
            if path.is_dir():
                if not modified_only:
                    self._roots.append(path)
                for file_path in lister(path):
                    self._insert(file_path.absolute())
            elif not modified_only or path in lister(path):
                self._insert(path)
        self._contexts = self._build_contexts()
        LOGGER.debug("collected %d files into %d contexts", len(self._files), len(self._contexts))
        return self.get_all_files()

    def _insert(self, path: Path) -> None:
        if path in self._language_of:
            return
        language = language_from_extension(path.suffix) if path.suffix else None
        self._language_of[path] = language
        self._files.append(path)
        extension = path.suffix.lower().lstrip(".")
        self._by_extension.setdefault(extension, []).append(path)
        if language is not None:
            self._by_language.setdefault(language, []).append(path)

    # Context building ---------------------------------------------------

    def _find_marker(self, directory: Path, markers: tuple[str, ...]) -> tuple[Path, str] | None:
        """Return the nearest ``(root, marker)`` at or above ``directory``."""

        key = (directory, markers)
        if key in self._marker_cache:
            return self._marker_cache[key]
        found: tuple[Path, str] | None = None
        for marker in markers:
            if (directory / marker).is_file():
                found = (directory, marker)
                break
        if found is None and directory.parent != directory:
            found = self._find_marker(directory.parent, markers)
        self._marker_cache[key] = found
        return found

    def _markers_for(self, language: Language | None) -> tuple[str, ...]:
        # Languages without ecosystem markers (docs, data files, unknown
        # extensions) attach to whichever project encloses them.
        if language is not None and language.value in PROJECT_MARKERS:
            return PROJECT_MARKERS[language.value]
        return _ANY_MARKERS

    def _build_contexts(self) -> list[PathContext]:
        builders: dict[Path, _ContextBuilder] = {}
        unmarked: list[Path] = []
        for path in self._files:
            language = self._language_of[path]
            found = self._find_marker(path.parent, self._markers_for(language))
            if found is None:
                unmarked.append(path)
                continue
            root, marker = found
            builder = builders.get(root)
            if builder is None:
                builder = builders[root] = _ContextBuilder(root=root, kind=KIND_MARKER, marker=marker)
            builder.add(path, language)

        if unmarked:
            root = common_root(path.parent for path in unmarked)
            builder = builders.get(root)
            if builder is None:
                builder = builders[root] = _ContextBuilder(root=root, kind=KIND_FALLBACK)
            for path in unmarked:
                builder.add(path, self._language_of[path])

        return [builders[root].build() for root in sorted(builders)]

    # Queries ----------------------------------------------------------------

    def get_all_files(self) -> list[Path]:
        """Return every collected file (the literal inputs in explicit mode)."""

        return list(self._files)

    def get_files_by_language(self, language: Language) -> list[Path]:
        return list(self._by_language.get(language, ()))

    def get_files_by_extension(self, extension: str) -> list[Path]:
        return list(self._by_extension.get(extension.lower().lstrip("."), ()))

    def get_all_contexts(self) -> list[PathContext]:
        return list(self._contexts)

    def context_for(self, path: Path) -> PathContext | None:
        """Return the context that owns ``path``, if any."""

        candidates = {path, path.absolute()}
        for context in self._contexts:
            if any(candidate in context.files for candidate in candidates):
                return context
        return None

    def languages(self) -> list[Language]:
        """Return indexed languages in first-seen order."""

        return list(self._by_language)

    # Argument optimisation ---------------------------------------------

    def get_optimized_paths_for_tool(self, tool: LintTool, selected: Iterable[Path] | None = None) -> list[Path]:
        """Return the argument list ``tool`` should receive.

        Explicit mode returns the literal inputs: directories unchanged and
        files the tool can handle. Discovered mode returns the applicable
        files, with fully-applicable directories collapsed (see
        :meth:`optimize_paths`) when the tool accepts directory arguments.

        Args:
            tool: Tool the arguments are built for.
            selected: Candidate paths; defaults to every collected path.

        Returns:
            list[Path]: Paths to pass to ``tool``; empty when nothing applies.
        """

        candidates = list(dict.fromkeys(self._files if selected is None else selected))
        if self.is_explicit:
            return [path for path in candidates if path.is_dir() or tool.can_handle(path)]
        applicable = [path for path in candidates if tool.can_handle(path)]
        if not getattr(tool, "accepts_directories", False):
            return applicable
        return self.optimize_paths(applicable)

    def optimize_paths(self, selected: Iterable[Path]) -> list[Path]:
        """Collapse directories whose discovered files are all in ``selected``.

        A directory is emitted instead of its files when it lies within a
        collected input directory, holds at least two discovered files
        (recursively) and every one of them is selected. The outermost such
        directory wins; remaining files are emitted individually. Selected
        paths the manager never collected are passed through unchanged.

        Args:
            selected: Paths to pass to a tool, normally a subset of the collected files.

        Returns:
            list[Path]: Sorted directories and files.
        """

        requested = list(dict.fromkeys(selected))
        chosen = [path for path in requested if path in self._language_of]
        emitted: set[Path] = {path for path in requested if path not in self._language_of}
        if self.is_explicit:
            return requested
        chosen_set = set(chosen)
        totals: dict[Path, int] = {}
        applicable: dict[Path, int] = {}
        for path in self._files:
            for directory in self._candidate_dirs(path):
                totals[directory] = totals.get(directory, 0) + 1
                if path in chosen_set:
                    applicable[directory] = applicable.get(directory, 0) + 1

        for path in chosen:
            target = path
            # Candidates are ordered outermost first.
            for directory in self._candidate_dirs(path):
                total = totals[directory]
                if total >= 2 and applicable.get(directory, 0) == total:
                    target = directory
                    break
            emitted.add(target)
        return sorted(emitted)

    def _candidate_dirs(self, path: Path) -> list[Path]:
        """Return ancestors of ``path`` inside a collected root, outermost first."""

        ancestors: list[Path] = []
        for directory in path.parents:
            if any(directory == root or root in directory.parents for root in self._roots):
                ancestors.append(directory)
            else:
                break
        ancestors.reverse()
        return ancestors


__all__ = ["KIND_FALLBACK", "KIND_MARKER", "PathManager", "PathMode", "common_root"]
