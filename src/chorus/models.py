# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the chorus package."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .languages import Framework, Language
from .severity import IssueSeverity

_K = TypeVar("_K")
_V = TypeVar("_V")


def _empty_mapping() -> Mapping[_K, _V]:
    return MappingProxyType({})


def _read_only(value: Mapping[_K, _V]) -> Mapping[_K, _V]:
    """Wrap a validated mapping so frozen models cannot be mutated through it."""
    return MappingProxyType(dict(value))


class ToolType(str, Enum):
    """Role a tool plays in a run."""

    FORMATTER = "formatter"
    LINTER = "linter"
    TYPECHECKER = "typechecker"
    FIXER = "fixer"

    def __str__(self) -> str:
        return self.value


class ToolConfig(BaseModel):
    """Per-tool settings supplied for a single invocation."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    extra_args: tuple[str, ...] = Field(default_factory=tuple)
    env_vars: Mapping[str, str] = Field(default_factory=_empty_mapping)
    executable_path: Path | None = None
    report_level: IssueSeverity | None = None
    auto_fix: bool = False
    check: bool = False

    @field_validator("report_level", mode="before")
    @classmethod
    def _coerce_report_level(cls, value: object) -> object:
        """Accept severity names in any case, as written in TOML files."""
        if isinstance(value, str):
            return IssueSeverity.parse(value)
        return value

    @field_validator("env_vars", mode="after")
    @classmethod
    def _freeze_env_vars(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return _read_only(value)


class LintIssue(BaseModel):
    """One structured diagnostic produced by a tool run."""

    model_config = ConfigDict(frozen=True)

    severity: IssueSeverity
    message: str
    file: Path | None = None
    line: int | None = None
    column: int | None = None
    code: str | None = None
    fix_available: bool = False


class LintResult(BaseModel):
    """Outcome of running one tool once.

    ``success`` means the tool ran and produced a meaningful result. A
    check-mode formatter that found unformatted files reports
    ``success=False`` together with the issues it found.
    """

    model_config = ConfigDict(frozen=True)

    tool_name: str
    success: bool
    issues: tuple[LintIssue, ...] = Field(default_factory=tuple)
    execution_time: float = 0.0
    stdout: str | None = None
    stderr: str | None = None

    @classmethod
    def skipped(cls, tool_name: str) -> LintResult:
        """Return the trivial success used when a tool is not invoked."""
        return cls(tool_name=tool_name, success=True)

    def with_issues(self, issues: tuple[LintIssue, ...]) -> LintResult:
        """Return a copy of the result carrying ``issues``."""
        return self.model_copy(update={"issues": issues})

    def with_execution_time(self, seconds: float) -> LintResult:
        """Return a copy of the result with ``execution_time`` set."""
        return self.model_copy(update={"execution_time": seconds})

    def issues_at_least(self, threshold: IssueSeverity) -> tuple[LintIssue, ...]:
        """Return issues whose severity meets ``threshold``."""
        return tuple(issue for issue in self.issues if issue.severity.at_least(threshold))


class DetectedTool(BaseModel):
    """Tool configuration file found on disk during detection."""

    model_config = ConfigDict(frozen=True)

    name: str
    config_path: Path
    tool_type: ToolType
    language: Language


class ProjectInfo(BaseModel):
    """Summary of a scanned project, rebuilt on every invocation."""

    model_config = ConfigDict(frozen=True)

    languages: tuple[Language, ...] = Field(default_factory=tuple)
    file_counts: Mapping[Language, int] = Field(default_factory=_empty_mapping)
    frameworks: tuple[Framework, ...] = Field(default_factory=tuple)
    detected_tools: tuple[DetectedTool, ...] = Field(default_factory=tuple)

    @field_validator("file_counts", mode="after")
    @classmethod
    def _freeze_file_counts(cls, value: Mapping[Language, int]) -> Mapping[Language, int]:
        return _read_only(value)

    @property
    def primary_language(self) -> Language | None:
        """Return the most common language, if any files were classified."""
        return self.languages[0] if self.languages else None

    @property
    def total_files(self) -> int:
        """Return the number of classified files."""
        return sum(self.file_counts.values())


class PathContext(BaseModel):
    """Files sharing one project root."""

    model_config = ConfigDict(frozen=True)

    root: Path
    files: tuple[Path, ...] = Field(default_factory=tuple)
    language: Language | None = None
    metadata: Mapping[str, str] = Field(default_factory=_empty_mapping)

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return _read_only(value)

    def contains(self, path: Path) -> bool:
        """Return ``True`` when ``path`` is one of this context's files."""
        return path in self.files


class ToolInfo(BaseModel):
    """Display snapshot of a registered tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    tool_type: ToolType
    languages: tuple[Language, ...]
    priority: int = 0
    available: bool = False
    version: str | None = None


__all__ = [
    "DetectedTool",
    "LintIssue",
    "LintResult",
    "PathContext",
    "ProjectInfo",
    "ToolConfig",
    "ToolInfo",
    "ToolType",
]
