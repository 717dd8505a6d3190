# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Language identification for files and directories."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from .constants import (
    CONTENT_SIGNATURES,
    CONTENT_SNIFF_BYTES,
    EXTENSION_LANGUAGES,
    FILENAME_LANGUAGES,
    SHEBANG_LANGUAGES,
)


class Language(str, Enum):
    """Languages recognised by chorus."""

    RUST = "rust"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    HTML = "html"
    CSS = "css"
    GO = "go"
    RUBY = "ruby"
    PHP = "php"
    DOCKER = "docker"
    MAKEFILE = "makefile"
    JAVA = "java"
    C = "c"
    CPP = "cpp"
    CSHARP = "csharp"
    SWIFT = "swift"
    MARKDOWN = "markdown"
    JSON = "json"
    YAML = "yaml"
    TOML = "toml"

    def __str__(self) -> str:
        return self.value


class Framework(str, Enum):
    """Application frameworks detected heuristically."""

    REACT = "react"
    VUE = "vue"
    ANGULAR = "angular"
    DJANGO = "django"
    FLASK = "flask"
    RAILS = "rails"

    def __str__(self) -> str:
        return self.value


def language_from_extension(extension: str) -> Language | None:
    """Return the language mapped to ``extension`` (with or without a dot)."""

    value = EXTENSION_LANGUAGES.get(extension.lower().lstrip("."))
    return Language(value) if value is not None else None


def language_from_filename(name: str) -> Language | None:
    """Return the language implied by a well-known filename such as ``Dockerfile``."""

    value = FILENAME_LANGUAGES.get(name)
    return Language(value) if value is not None else None


def language_from_content(path: Path) -> Language | None:
    """Sniff the leading bytes of ``path`` for shebangs and document markers.

    Args:
        path: File whose content should be inspected.

    Returns:
        Language | None: Detected language, or ``None`` when nothing matched or
        the file could not be read.
    """

    try:
        with path.open("r", encoding="utf-8", errors="ignore") as handle:
            head = handle.read(CONTENT_SNIFF_BYTES)
    except OSError:
        return None
    lowered = head.lower()
    if lowered.startswith("#!"):
        first_line = lowered.splitlines()[0]
        for needle, value in SHEBANG_LANGUAGES:
            if needle in first_line:
                return Language(value)
    for needle, value in CONTENT_SIGNATURES:
        if needle in lowered:
            return Language(value)
    return None


def language_from_path(path: Path, *, sniff: bool = True) -> Language | None:
    """Classify ``path`` by extension, then filename, then content.

    Content sniffing only applies to files without an extension and can be
    disabled with ``sniff=False`` for callers that must not touch the disk.
    """

    if path.suffix:
        by_extension = language_from_extension(path.suffix)
        if by_extension is not None:
            return by_extension
    by_name = language_from_filename(path.name)
    if by_name is not None:
        return by_name
    if sniff and not path.suffix and path.is_file():
        return language_from_content(path)
    return None


__all__ = [
    "Framework",
    "Language",
    "language_from_content",
    "language_from_extension",
    "language_from_filename",
    "language_from_path",
]
