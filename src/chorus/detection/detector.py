# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Classify input paths into languages, frameworks and configured tools."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..discovery import FileLister, expand_patterns, list_files, walk_files
from ..errors import DetectionFailedError, InvalidDirectoryError
from ..languages import Language, language_from_path
from ..models import ProjectInfo
from .frameworks import detect_frameworks
from .tool_configs import detect_tools_in_directories

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _Tally:
    """Accumulates classified files while preserving discovery order."""

    counts: dict[Language, int] = field(default_factory=dict)
    files: list[Path] = field(default_factory=list)
    seen: set[Path] = field(default_factory=set)

    def add(self, path: Path, language: Language) -> None:
        if path in self.seen:
            return
        self.seen.add(path)
        self.files.append(path)
        self.counts[language] = self.counts.get(language, 0) + 1

    def ranked_languages(self) -> tuple[Language, ...]:
        # ``counts`` preserves first-discovery order and ``sorted`` is stable,
        # so equal counts keep that order.
        return tuple(sorted(self.counts, key=lambda language: -self.counts[language]))


class LanguageDetector:
    """Build a :class:`ProjectInfo` from files, directories or patterns.

    Args:
        lister: Collaborator returning the non-ignored files beneath a directory.
        max_depth: When set, scan directories with a plain walk limited to
            this many levels instead of ``lister``.
        sniff_content: Inspect extensionless files for shebangs and markup.
    """

    def __init__(
        self,
        *,
        lister: FileLister = list_files,
        max_depth: int | None = None,
        sniff_content: bool = True,
    ) -> None:
        self._lister = lister
        self._max_depth = max_depth
        self._sniff_content = sniff_content

    def detect(self, paths: Sequence[Path] = ()) -> tuple[ProjectInfo, list[Path]]:
        """Classify ``paths`` (the current directory when empty).

        Args:
            paths: Files and directories to inspect.

        Returns:
            tuple[ProjectInfo, list[Path]]: Project summary and the classified files.

        Raises:
            InvalidDirectoryError: If any path is neither a file nor a directory.
            DetectionFailedError: If no file could be classified.
        """

        inputs = list(paths) or [Path.cwd()]
        for path in inputs:
            if not path.exists():
                raise InvalidDirectoryError(path)

        tally = _Tally()
        scan_dirs: list[Path] = []
        for path in inputs:
            absolute = path.absolute()
            if absolute.is_file():
                self._classify(absolute, tally)
                _append_unique(scan_dirs, absolute.parent)
                continue
            _append_unique(scan_dirs, absolute)
            for file_path in self._list_directory(absolute):
                self._classify(file_path, tally)

        return self._finish(tally, scan_dirs, reason=f"no recognised files in {', '.join(map(str, inputs))}")

    def detect_with_patterns(self, directory: Path, patterns: Sequence[str]) -> tuple[ProjectInfo, list[Path]]:
        """Classify files under ``directory`` selected by ``patterns``.

        A pattern naming an existing file selects it directly; any other
        pattern is a glob matched against paths relative to ``directory``.
        Without patterns this behaves like ``detect([directory])``.

        Args:
            directory: Base directory for the scan.
            patterns: File names or glob patterns such as ``"templates/**/*.html"``.

        Returns:
            tuple[ProjectInfo, list[Path]]: Project summary and the classified files.

        Raises:
            InvalidDirectoryError: If ``directory`` is not a directory.
            DetectionFailedError: If no selected file could be classified.
        """

        if not directory.is_dir():
            raise InvalidDirectoryError(directory)
        if not patterns:
            return self.detect([directory])

        base = directory.absolute()
        tally = _Tally()
        scan_dirs: list[Path] = [base]
        for file_path in expand_patterns(base, patterns, self._list_directory):
            self._classify(file_path, tally)
            _append_unique(scan_dirs, file_path.parent)
        return self._finish(tally, scan_dirs, reason=f"no files matched {', '.join(patterns)} in {directory}")

    def classify(self, path: Path) -> Language | None:
        """Return the language of a single file, or ``None`` if unrecognised."""

        return language_from_path(path, sniff=self._sniff_content)

    def _classify(self, path: Path, tally: _Tally) -> None:
        language = self.classify(path)
        if language is None:
            LOGGER.debug("unclassified file %s", path)
            return
        tally.add(path, language)

    def _list_directory(self, directory: Path) -> list[Path]:
        if self._max_depth is not None:
            return list(walk_files(directory, max_depth=self._max_depth))
        return self._lister(directory)

    def _finish(self, tally: _Tally, scan_dirs: Iterable[Path], *, reason: str) -> tuple[ProjectInfo, list[Path]]:
        if not tally.files:
            raise DetectionFailedError(reason)
        directories = list(scan_dirs)
        languages = tally.ranked_languages()
        info = ProjectInfo(
            languages=languages,
            file_counts=dict(tally.counts),
            frameworks=tuple(detect_frameworks(directories, languages)),
            detected_tools=tuple(detect_tools_in_directories(directories)),
        )
        LOGGER.debug("detected languages %s across %d files", [str(lang) for lang in languages], len(tally.files))
        return info, list(tally.files)


def _append_unique(items: list[Path], item: Path) -> None:
    if item not in items:
        items.append(item)


__all__ = ["LanguageDetector"]
