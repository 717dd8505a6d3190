# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the tool output parsers."""

from __future__ import annotations

from pathlib import Path

import pytest

from chorus.severity import IssueSeverity
from chorus.tools.parsers import (
    NEEDS_FORMATTING,
    parse_cargo_short,
    parse_djlint_lint,
    parse_pylint,
    parse_ruff,
    parse_would_reformat,
    ruff_severity,
)


@pytest.mark.parametrize(
    ("code", "severity"),
    [
        ("E501", IssueSeverity.ERROR),
        ("F821", IssueSeverity.ERROR),
        ("W291", IssueSeverity.WARNING),
        ("I001", IssueSeverity.STYLE),
        ("UP006", IssueSeverity.STYLE),
    ],
)
def test_ruff_severity(code: str, severity: IssueSeverity) -> None:
    assert ruff_severity(code) is severity


def test_parse_ruff_handles_windows_style_paths_and_noise() -> None:
    output = "\n".join(
        [
            r"C:\work\app.py:10:1: E302 Expected 2 blank lines, found 1",
            "warning: `ruff` is reading configuration from pyproject.toml",
            "",
            "Found 1 error.",
        ]
    )

    (issue,) = parse_ruff(output)

    assert issue.file == Path(r"C:\work\app.py")
    assert issue.line == 10
    assert not issue.fix_available


def test_parse_pylint_maps_message_categories() -> None:
    output = "\n".join(
        [
            "************* Module pkg.mod",
            "pkg/mod.py:1:0: C0114: Missing module docstring (missing-module-docstring)",
            "pkg/mod.py:4:4: W0612: Unused variable 'x' (unused-variable)",
            "pkg/mod.py:9:0: E1101: Module 'os' has no 'nope' member (no-member)",
            "pkg/mod.py:1:0: F0001: No module named missing",
        ]
    )

    issues = parse_pylint(output)

    assert [(issue.code, issue.severity) for issue in issues] == [
        ("C0114", IssueSeverity.STYLE),
        ("W0612", IssueSeverity.WARNING),
        ("E1101", IssueSeverity.ERROR),
        ("F0001", IssueSeverity.ERROR),
    ]
    assert issues[1].message == "Unused variable 'x'"
    assert issues[3].message == "No module named missing"


def test_parse_cargo_short_anchors_relative_paths() -> None:
    crate = Path("/work/crate")
    output = "\n".join(
        [
            "    Checking crate v0.1.0 (/work/crate)",
            "src/lib.rs:2:5: error[E0425]: cannot find value `y` in this scope",
            "/abs/build.rs:1:1: warning: unused import",
            "error: could not compile `crate` due to previous error",
        ]
    )

    issues = parse_cargo_short(output, crate)

    assert [issue.file for issue in issues] == [crate / "src/lib.rs", Path("/abs/build.rs")]
    assert issues[0].severity is IssueSeverity.ERROR
    assert issues[0].code == "E0425"
    assert not issues[0].fix_available
    assert issues[1].code is None


def test_parse_would_reformat_reads_every_stream() -> None:
    issues = parse_would_reformat("would reformat src/a.py", "Would reformat: src/b.py\nAll done!")

    assert [issue.file for issue in issues] == [Path("src/a.py"), Path("src/b.py")]
    assert all(issue.message == NEEDS_FORMATTING and issue.fix_available for issue in issues)


def test_parse_djlint_switches_current_file() -> None:
    output = "\n".join(
        [
            "Linting 2/2 files",
            "templates/a.html",
            "H025 3:0 Orphan tag found.",
            "templates/b.html",
            "T001 1:4 Variables should be wrapped in a single whitespace.",
        ]
    )

    issues = parse_djlint_lint(output)

    assert [(issue.file, issue.severity) for issue in issues] == [
        (Path("templates/a.html"), IssueSeverity.WARNING),
        (Path("templates/b.html"), IssueSeverity.ERROR),
    ]
