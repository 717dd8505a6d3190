# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Line-oriented parsers translating tool output into :class:`LintIssue` objects."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Final

from ..models import LintIssue
from ..severity import IssueSeverity

NEEDS_FORMATTING: Final[str] = "File needs formatting"

_RUFF_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+):\s+(?P<code>[A-Z]+\d+)(?P<fix>\s+\[\*\])?\s+(?P<message>.+)$"
)
_MYPY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?:(?P<column>\d+):)?\s*(?P<level>error|warning|note):\s*(?P<message>.+?)"
    r"(?:\s+\[(?P<code>[\w-]+)\])?$"
)
_PYLINT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+):\s*(?P<code>[CRWEFI]\d{4}):\s*(?P<message>.+?)"
    r"(?:\s+\((?P<symbol>[\w-]+)\))?$"
)
_ESLINT_UNIX_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+):\s*(?P<message>.+?)"
    r"\s+\[(?P<level>Error|Warning)(?:/(?P<code>[^\]]+))?\]$"
)
_TSC_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<column>\d+)\):\s*(?P<level>error|warning)\s+(?P<code>TS\d+):\s*(?P<message>.+)$"
)
_CARGO_SHORT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>[^\s:][^:]*):(?P<line>\d+):(?P<column>\d+):\s*(?P<level>error|warning)"
    r"(?:\[(?P<code>[^\]]+)\])?:\s*(?P<message>.+)$"
)
_RUSTFMT_DIFF_PATTERN: Final[re.Pattern[str]] = re.compile(r"^Diff in (?P<file>.+?)(?: at line |:)(?P<line>\d+):?\s*$")
_DJLINT_ISSUE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<code>[A-Z]\d{3})\s+(?P<line>\d+):(?P<column>\d+)\s+(?P<message>.+)$"
)
_WOULD_REFORMAT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^would reformat:?\s+(?P<file>.+)$", re.IGNORECASE)
_PRETTIER_WARN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\[warn\]\s+(?P<file>\S.*)$")


def _lines(*streams: str | None) -> Iterator[str]:
    for stream in streams:
        for raw in (stream or "").splitlines():
            line = raw.rstrip()
            if line:
                yield line


def _int(value: str | None) -> int | None:
    return int(value) if value else None


def ruff_severity(code: str) -> IssueSeverity:
    """Map a ruff rule code onto a severity (E/F errors, W warnings, rest style)."""

    if code.startswith(("E", "F")):
        return IssueSeverity.ERROR
    if code.startswith("W"):
        return IssueSeverity.WARNING
    return IssueSeverity.STYLE


def parse_ruff(stdout: str | None) -> list[LintIssue]:
    """Parse ``ruff check --output-format=concise`` output."""

    issues: list[LintIssue] = []
    for line in _lines(stdout):
        match = _RUFF_PATTERN.match(line)
        if match is None:
            continue
        code = match.group("code")
        issues.append(
            LintIssue(
                severity=ruff_severity(code),
                message=match.group("message").strip(),
                file=Path(match.group("file")),
                line=int(match.group("line")),
                column=int(match.group("column")),
                code=code,
                fix_available=match.group("fix") is not None,
            )
        )
    return issues


_MYPY_LEVELS: Final[dict[str, IssueSeverity]] = {
    "error": IssueSeverity.ERROR,
    "warning": IssueSeverity.WARNING,
    "note": IssueSeverity.INFO,
}


def parse_mypy(stdout: str | None) -> list[LintIssue]:
    """Parse mypy output produced with ``--show-column-numbers --no-pretty``."""

    issues: list[LintIssue] = []
    for line in _lines(stdout):
        match = _MYPY_PATTERN.match(line)
        if match is None:
            continue
        issues.append(
            LintIssue(
                severity=_MYPY_LEVELS[match.group("level")],
                message=match.group("message").strip(),
                file=Path(match.group("file")),
                line=int(match.group("line")),
                column=_int(match.group("column")),
                code=match.group("code"),
            )
        )
    return issues


_PYLINT_LEVELS: Final[dict[str, IssueSeverity]] = {
    "F": IssueSeverity.ERROR,
    "E": IssueSeverity.ERROR,
    "W": IssueSeverity.WARNING,
    "I": IssueSeverity.INFO,
    "C": IssueSeverity.STYLE,
    "R": IssueSeverity.STYLE,
}


def parse_pylint(stdout: str | None) -> list[LintIssue]:
    """Parse pylint output rendered with ``{path}:{line}:{column}: {msg_id}: {msg} ({symbol})``."""

    issues: list[LintIssue] = []
    for line in _lines(stdout):
        match = _PYLINT_PATTERN.match(line)
        if match is None:
            continue
        code = match.group("code")
        issues.append(
            LintIssue(
                severity=_PYLINT_LEVELS[code[0]],
                message=match.group("message").strip(),
                file=Path(match.group("file")),
                line=int(match.group("line")),
                column=int(match.group("column")),
                code=code,
            )
        )
    return issues


def parse_eslint_unix(stdout: str | None) -> list[LintIssue]:
    """Parse ESLint's ``unix`` formatter output."""

    issues: list[LintIssue] = []
    for line in _lines(stdout):
        match = _ESLINT_UNIX_PATTERN.match(line)
        if match is None:
            continue
        level = match.group("level")
        issues.append(
            LintIssue(
                severity=IssueSeverity.ERROR if level == "Error" else IssueSeverity.WARNING,
                message=match.group("message").strip(),
                file=Path(match.group("file")),
                line=int(match.group("line")),
                column=int(match.group("column")),
                code=match.group("code") or None,
            )
        )
    return issues


def parse_tsc(stdout: str | None) -> list[LintIssue]:
    """Parse ``tsc --pretty false`` diagnostics."""

    issues: list[LintIssue] = []
    for line in _lines(stdout):
        match = _TSC_PATTERN.match(line)
        if match is None:
            continue
        issues.append(
            LintIssue(
                severity=IssueSeverity.ERROR if match.group("level") == "error" else IssueSeverity.WARNING,
                message=match.group("message").strip(),
                file=Path(match.group("file")),
                line=int(match.group("line")),
                column=int(match.group("column")),
                code=match.group("code"),
            )
        )
    return issues


def parse_cargo_short(stderr: str | None, base: Path | None = None) -> list[LintIssue]:
    """Parse ``cargo clippy --message-format=short`` diagnostics.

    Args:
        stderr: Captured cargo output.
        base: Crate directory used to anchor the relative paths cargo prints.

    Returns:
        list[LintIssue]: Parsed diagnostics.
    """

    issues: list[LintIssue] = []
    for line in _lines(stderr):
        match = _CARGO_SHORT_PATTERN.match(line)
        if match is None:
            continue
        file_path = Path(match.group("file"))
        if base is not None and not file_path.is_absolute():
            file_path = base / file_path
        code = match.group("code")
        issues.append(
            LintIssue(
                severity=IssueSeverity.ERROR if match.group("level") == "error" else IssueSeverity.WARNING,
                message=match.group("message").strip(),
                file=file_path,
                line=int(match.group("line")),
                column=int(match.group("column")),
                code=code,
                fix_available=code is not None and code.startswith("clippy::"),
            )
        )
    return issues


def formatting_issue(file: Path | None, line: int | None = None, message: str = NEEDS_FORMATTING) -> LintIssue:
    """Return the style issue a check-mode formatter reports for an unformatted file."""

    return LintIssue(severity=IssueSeverity.STYLE, message=message, file=file, line=line, fix_available=True)


def parse_rustfmt_check(stdout: str | None) -> list[LintIssue]:
    """Parse ``rustfmt --check`` diff headers into one issue per hunk."""

    issues: list[LintIssue] = []
    for line in _lines(stdout):
        match = _RUSTFMT_DIFF_PATTERN.match(line)
        if match is not None:
            issues.append(formatting_issue(Path(match.group("file")), int(match.group("line"))))
    return issues


def parse_would_reformat(*streams: str | None) -> list[LintIssue]:
    """Parse ``would reformat <file>`` lines printed by black and ``ruff format --check``."""

    issues: list[LintIssue] = []
    for line in _lines(*streams):
        match = _WOULD_REFORMAT_PATTERN.match(line.strip())
        if match is not None:
            issues.append(formatting_issue(Path(match.group("file").strip())))
    return issues


def parse_prettier_check(*streams: str | None) -> list[LintIssue]:
    """Parse ``prettier --check`` ``[warn] <file>`` lines, ignoring its summary line."""

    issues: list[LintIssue] = []
    for line in _lines(*streams):
        match = _PRETTIER_WARN_PATTERN.match(line)
        if match is None:
            continue
        target = match.group("file").strip()
        if " " in target and "style issues" in target.lower():
            continue
        issues.append(formatting_issue(Path(target)))
    return issues


def parse_djlint_lint(stdout: str | None, files: Iterable[Path] = ()) -> list[LintIssue]:
    """Parse ``djlint --lint`` output.

    djlint prints each file path on its own line followed by issues of the
    form ``H006 4:8 message``; a line naming one of ``files`` switches the
    current file.
    """

    known = {str(path): path for path in files}
    current: Path | None = None
    issues: list[LintIssue] = []
    for line in _lines(stdout):
        stripped = line.strip()
        if stripped in known:
            current = known[stripped]
            continue
        match = _DJLINT_ISSUE_PATTERN.match(stripped)
        if match is None:
            if stripped.endswith((".html", ".htm", ".jinja", ".j2", ".hbs")) and " " not in stripped:
                current = Path(stripped)
            continue
        code = match.group("code")
        issues.append(
            LintIssue(
                severity=IssueSeverity.ERROR if code.startswith("T") else IssueSeverity.WARNING,
                message=match.group("message").strip(),
                file=current,
                line=int(match.group("line")),
                column=int(match.group("column")),
                code=code,
            )
        )
    return issues


__all__ = [
    "NEEDS_FORMATTING",
    "formatting_issue",
    "parse_cargo_short",
    "parse_djlint_lint",
    "parse_eslint_unix",
    "parse_mypy",
    "parse_prettier_check",
    "parse_pylint",
    "parse_ruff",
    "parse_rustfmt_check",
    "parse_tsc",
    "parse_would_reformat",
    "ruff_severity",
]
