# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for file discovery helpers."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from chorus.discovery import expand_patterns, list_files, list_modified_files, matches_pattern, walk_files
from chorus.discovery.git import default_git_runner
from chorus.process import CommandOptions, SubprocessExecutionError


def _git_runner(tracked: list[str], modified: list[str] | None = None) -> Callable[[Sequence[str], Path], list[str]]:
    def runner(cmd: Sequence[str], cwd: Path) -> list[str]:
        if "rev-parse" in cmd:
            return ["true"]
        if "--modified" in cmd:
            return list(modified or [])
        return list(tracked)

    return runner


def _outside_git(cmd: Sequence[str], cwd: Path) -> None:
    return None


def test_walk_files_prunes_excluded_directories(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files(
        {
            "b.py": "",
            "a.py": "",
            "pkg/mod.py": "",
            "node_modules/lib/index.js": "",
            ".git/config": "",
            ".venv/bin/activate": "",
        }
    )

    found = [path.relative_to(tmp_path).as_posix() for path in walk_files(tmp_path)]

    assert found == ["a.py", "b.py", "pkg/mod.py"]


def test_list_files_uses_git_inside_work_tree(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"kept.py": "", "ignored.py": "", "target/out.py": ""})

    files = list_files(tmp_path, runner=_git_runner(["kept.py", "target/out.py", "deleted.py"]))

    assert files == [tmp_path / "kept.py"]


def test_list_files_falls_back_to_walk(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"one.py": "", "two/three.rs": ""})

    files = list_files(tmp_path, runner=_outside_git)

    assert files == [tmp_path / "one.py", tmp_path / "two" / "three.rs"]


def test_list_files_handles_files_and_missing_paths(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    (single,) = write_files({"only.py": ""})

    assert list_files(single, runner=_outside_git) == [single]
    with pytest.raises(FileNotFoundError):
        list_files(tmp_path / "missing", runner=_outside_git)


def test_list_modified_files(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    changed, unchanged = write_files({"changed.py": "", "unchanged.py": ""})
    runner = _git_runner(["changed.py", "unchanged.py"], modified=["changed.py"])

    assert list_modified_files(tmp_path, runner=runner) == [changed]
    assert list_modified_files(changed, runner=runner) == [changed]
    assert list_modified_files(unchanged, runner=runner) == []
    assert list_modified_files(tmp_path, runner=_outside_git) == []


@pytest.mark.parametrize(
    ("relative", "pattern", "expected"),
    [
        ("src/app.py", "src/*.py", True),
        ("src/app.py", "*.py", True),
        ("templates/base.html", "templates/**/*.html", True),
        ("templates/a/b/c.html", "templates/**/*.html", True),
        ("static/base.html", "templates/**/*.html", False),
        ("app.py", "./app.py", True),
        ("app.pyc", "*.py", False),
    ],
)
def test_matches_pattern(relative: str, pattern: str, expected: bool) -> None:
    assert matches_pattern(relative, pattern) is expected


def test_expand_patterns_mixes_files_dirs_and_globs(tmp_path: Path, write_files: Callable[..., list[Path]]) -> None:
    write_files({"README.md": "", "lib/a.rs": "", "lib/b.rs": "", "src/main.py": ""})

    patterns = ["README.md", "lib", "**/*.py", "README.md"]
    selected = expand_patterns(tmp_path, patterns, lister=lambda d: sorted(walk_files(d)))

    assert [path.relative_to(tmp_path).as_posix() for path in selected] == [
        "README.md",
        "lib/a.rs",
        "lib/b.rs",
        "src/main.py",
    ]


def test_default_git_runner_treats_failures_as_outside_git(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: list[CommandOptions] = []

    def failing(cmd: Sequence[str], options: CommandOptions | None = None) -> CompletedProcess[str]:
        assert options is not None
        seen.append(options)
        raise SubprocessExecutionError(cmd, 128, "", "fatal: not a git repository")

    monkeypatch.setattr("chorus.discovery.git.run_command", failing)

    assert default_git_runner(("git", "rev-parse", "--is-inside-work-tree"), tmp_path) is None
    assert seen[0].check is True
    assert seen[0].cwd == tmp_path


def test_default_git_runner_splits_nul_separated_output(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def listing(cmd: Sequence[str], options: CommandOptions | None = None) -> CompletedProcess[str]:
        return CompletedProcess(list(cmd), 0, stdout="a.py\0pkg/b.py\0", stderr="")

    monkeypatch.setattr("chorus.discovery.git.run_command", listing)

    assert default_git_runner(("git", "ls-files", "-z"), tmp_path) == ["a.py", "pkg/b.py"]
