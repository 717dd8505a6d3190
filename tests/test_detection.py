# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for project detection."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from chorus.detection import LanguageDetector, detect_frameworks, detect_tool_configs
from chorus.errors import DetectionFailedError, InvalidDirectoryError
from chorus.languages import Framework, Language
from chorus.models import ToolType


@pytest.mark.usefixtures("no_git")
def test_detect_ranks_languages_by_count(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files(
        {
            "src/a.py": "",
            "src/b.py": "",
            "src/c.py": "",
            "web/app.js": "",
            "README.md": "# hi\n",
            "data.bin": "",
        }
    )

    info, files = LanguageDetector().detect([tmp_path])

    # README.md is discovered before javascript, so it wins the 1-1 tie.
    assert info.languages == (Language.PYTHON, Language.MARKDOWN, Language.JAVASCRIPT)
    assert info.primary_language is Language.PYTHON
    assert info.file_counts[Language.PYTHON] == 3
    assert info.total_files == 5
    assert tmp_path / "data.bin" not in files


@pytest.mark.usefixtures("no_git")
def test_ties_keep_discovery_order(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"a.rs": "", "b.py": ""})

    info, _ = LanguageDetector().detect([tmp_path])

    assert info.languages == (Language.RUST, Language.PYTHON)


def test_detect_accepts_single_files(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    (script,) = write_files({"main.rs": "fn main() {}\n"})

    info, files = LanguageDetector().detect([script])

    assert info.languages == (Language.RUST,)
    assert files == [script]


def test_detect_rejects_missing_paths(tmp_path: Path) -> None:
    with pytest.raises(InvalidDirectoryError) as excinfo:
        LanguageDetector().detect([tmp_path / "nope"])

    assert excinfo.value.path == tmp_path / "nope"


@pytest.mark.usefixtures("no_git")
def test_detect_fails_without_recognised_files(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"blob.xyz": "", "notes": "plain text\n"})

    with pytest.raises(DetectionFailedError):
        LanguageDetector().detect([tmp_path])


@pytest.mark.usefixtures("no_git")
def test_detect_with_patterns(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files(
        {
            "templates/base.html": "<html></html>",
            "templates/partials/nav.html": "<nav></nav>",
            "app.py": "",
        }
    )

    info, files = LanguageDetector().detect_with_patterns(tmp_path, ["templates/**/*.html"])

    assert info.languages == (Language.HTML,)
    assert sorted(path.name for path in files) == ["base.html", "nav.html"]


@pytest.mark.usefixtures("no_git")
def test_detect_with_patterns_selects_existing_file(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"app.py": "", "lib.rs": ""})

    info, files = LanguageDetector().detect_with_patterns(tmp_path, ["lib.rs"])

    assert info.languages == (Language.RUST,)
    assert files == [tmp_path / "lib.rs"]


def test_detect_with_patterns_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(InvalidDirectoryError):
        LanguageDetector().detect_with_patterns(tmp_path / "missing", ["*.py"])


@pytest.mark.usefixtures("no_git")
def test_detect_with_patterns_reports_empty_match(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"app.py": ""})

    with pytest.raises(DetectionFailedError):
        LanguageDetector().detect_with_patterns(tmp_path, ["*.go"])


def test_max_depth_limits_walk(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"top.py": "", "deep/nested/inner.rs": ""})

    info, _ = LanguageDetector(max_depth=1).detect([tmp_path])

    assert info.languages == (Language.PYTHON,)


def test_injected_lister_is_used(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    (kept, _ignored) = write_files({"kept.go": "", "ignored.py": ""})

    info, files = LanguageDetector(lister=lambda directory: [kept]).detect([tmp_path])

    assert info.languages == (Language.GO,)
    assert files == [kept]


@pytest.mark.usefixtures("no_git")
def test_frameworks_and_tool_configs_are_reported(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files(
        {
            "manage.py": "import django\n",
            "ruff.toml": "line-length = 100\n",
            "app/views.py": "",
        }
    )

    info, _ = LanguageDetector().detect([tmp_path])

    assert Framework.DJANGO in info.frameworks
    ruff = next(tool for tool in info.detected_tools if tool.name == "ruff")
    assert ruff.config_path == tmp_path / "ruff.toml"
    assert ruff.tool_type is ToolType.LINTER


def test_frameworks_are_gated_by_language(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"package.json": '{"dependencies": {"react": "^18"}}'})

    assert detect_frameworks([tmp_path], [Language.PYTHON]) == []
    assert detect_frameworks([tmp_path], [Language.JAVASCRIPT]) == [Framework.REACT]


def test_detect_tool_configs_takes_first_candidate(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"rustfmt.toml": "", ".rustfmt.toml": ""})

    found = [tool for tool in detect_tool_configs(tmp_path) if tool.name == "rustfmt"]

    assert [tool.config_path.name for tool in found] == ["rustfmt.toml"]
