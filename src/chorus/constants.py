# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across chorus modules."""

from __future__ import annotations

from typing import Final

CHORUS_DIR_NAME: Final[str] = "chorus"

PROJECT_CONFIG_FILENAMES: Final[tuple[str, ...]] = (".chorus.toml", "chorus.toml")

ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        ".venv",
        "venv",
        "target",
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".tox",
    }
)

# Keys are lowercase extensions without the leading dot; values are Language values.
EXTENSION_LANGUAGES: Final[dict[str, str]] = {
    "rs": "rust",
    "py": "python",
    "pyi": "python",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "html": "html",
    "htm": "html",
    "css": "css",
    "scss": "css",
    "sass": "css",
    "less": "css",
    "go": "go",
    "rb": "ruby",
    "php": "php",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "h": "cpp",
    "hpp": "cpp",
    "cs": "csharp",
    "swift": "swift",
    "md": "markdown",
    "markdown": "markdown",
    "json": "json",
    "yml": "yaml",
    "yaml": "yaml",
    "toml": "toml",
}

FILENAME_LANGUAGES: Final[dict[str, str]] = {
    "Dockerfile": "docker",
    "Makefile": "makefile",
    "GNUmakefile": "makefile",
    "Gemfile": "ruby",
    "Rakefile": "ruby",
    "go.mod": "go",
    "go.sum": "go",
}

# Checked in order against the lowercased leading content of extensionless files.
CONTENT_SIGNATURES: Final[tuple[tuple[str, str], ...]] = (
    ("<?php", "php"),
    ("<!doctype html", "html"),
    ("<html", "html"),
)

SHEBANG_LANGUAGES: Final[tuple[tuple[str, str], ...]] = (
    ("python", "python"),
    ("node", "javascript"),
    ("ruby", "ruby"),
)

CONTENT_SNIFF_BYTES: Final[int] = 4096

PROJECT_MARKERS: Final[dict[str, tuple[str, ...]]] = {
    "rust": ("Cargo.toml",),
    "python": ("pyproject.toml", "setup.py", "setup.cfg"),
    "javascript": ("package.json",),
    "typescript": ("tsconfig.json", "package.json"),
    "go": ("go.mod",),
    "ruby": ("Gemfile",),
    "php": ("composer.json",),
    "java": ("pom.xml", "build.gradle", "build.gradle.kts"),
    "swift": ("Package.swift",),
    "csharp": ("Directory.Build.props",),
    "c": ("CMakeLists.txt", "meson.build"),
    "cpp": ("CMakeLists.txt", "meson.build"),
}

# Ordered candidates per (tool, tool type, language); the first existing file wins.
TOOL_CONFIG_FILES: Final[tuple[tuple[str, str, str, tuple[str, ...]], ...]] = (
    ("rustfmt", "formatter", "rust", ("rustfmt.toml", ".rustfmt.toml")),
    ("clippy", "linter", "rust", ("clippy.toml", ".clippy.toml")),
    ("black", "formatter", "python", ("pyproject.toml",)),
    ("ruff", "linter", "python", ("ruff.toml", ".ruff.toml", "pyproject.toml")),
    ("pylint", "linter", "python", (".pylintrc", "pylintrc")),
    ("mypy", "typechecker", "python", ("mypy.ini", ".mypy.ini")),
    (
        "prettier",
        "formatter",
        "javascript",
        (
            ".prettierrc.json",
            ".prettierrc.yaml",
            ".prettierrc.yml",
            ".prettierrc.js",
            ".prettierrc.toml",
            ".prettierrc",
            "prettier.config.js",
        ),
    ),
    (
        "eslint",
        "linter",
        "javascript",
        (
            ".eslintrc.json",
            ".eslintrc.yaml",
            ".eslintrc.yml",
            ".eslintrc.js",
            ".eslintrc",
            "eslint.config.js",
        ),
    ),
    ("typescript", "typechecker", "typescript", ("tsconfig.json",)),
    ("dprint", "formatter", "javascript", ("dprint.json",)),
    (
        "stylelint",
        "linter",
        "css",
        (
            ".stylelintrc.json",
            ".stylelintrc.yaml",
            ".stylelintrc.yml",
            ".stylelintrc.js",
            ".stylelintrc",
            "stylelint.config.js",
        ),
    ),
    ("htmlhint", "linter", "html", (".htmlhintrc",)),
    ("djlint", "formatter", "html", (".djlintrc",)),
)

# Rich styles keyed by theme, then by severity value plus the "accent" and
# "muted" roles used for headings and locations.
THEMES: Final[dict[str, dict[str, str]]] = {
    "default": {
        "error": "bold red",
        "warning": "yellow",
        "info": "cyan",
        "style": "magenta",
        "accent": "bold cyan",
        "muted": "dim",
    },
    "dark": {
        "error": "bold bright_red",
        "warning": "bright_yellow",
        "info": "bright_cyan",
        "style": "bright_magenta",
        "accent": "bold bright_white",
        "muted": "grey50",
    },
    "monochrome": {
        "error": "bold",
        "warning": "bold",
        "info": "",
        "style": "italic",
        "accent": "bold",
        "muted": "dim",
    },
}

__all__ = [
    "ALWAYS_EXCLUDE_DIRS",
    "CHORUS_DIR_NAME",
    "CONTENT_SIGNATURES",
    "CONTENT_SNIFF_BYTES",
    "EXTENSION_LANGUAGES",
    "FILENAME_LANGUAGES",
    "PROJECT_CONFIG_FILENAMES",
    "PROJECT_MARKERS",
    "SHEBANG_LANGUAGES",
    "THEMES",
    "TOOL_CONFIG_FILES",
]
