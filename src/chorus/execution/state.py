# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-tool run states and the aggregated batch result."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from ..errors import ToolError
from ..models import LintIssue, LintResult
from ..severity import IssueSeverity


class ToolState(str, Enum):
    """Lifecycle of one tool within a batch.

    ``PENDING`` moves either straight to a skip or ``NOT_FOUND`` state, or to
    ``RUNNING`` and then one of ``SUCCESS``, ``EXECUTION_FAILED`` or
    ``TOOL_FAILED``.
    """

    PENDING = "pending"
    RUNNING = "running"
    SKIPPED_DISABLED = "skipped-disabled"
    SKIPPED_NO_FILES = "skipped-no-files"
    NOT_FOUND = "not-found"
    SUCCESS = "success"
    EXECUTION_FAILED = "execution-failed"
    TOOL_FAILED = "tool-failed"

    @property
    def is_terminal(self) -> bool:
        return self not in (ToolState.PENDING, ToolState.RUNNING)

    @property
    def is_skip(self) -> bool:
        return self in (ToolState.SKIPPED_DISABLED, ToolState.SKIPPED_NO_FILES)


class BatchStatus(str, Enum):
    """Whole-batch outcome."""

    COMPLETED = "completed"
    NO_TOOLS = "no_tools"
    NO_FILES = "no_files"


@dataclass(frozen=True, slots=True)
class ToolRun:
    """Terminal record for one dispatched tool; exactly one of ``result``/``error`` is set."""

    order: int
    tool_name: str
    state: ToolState
    result: LintResult | None = None
    error: ToolError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def outcome(self) -> LintResult | ToolError:
        if self.error is not None:
            return self.error
        if self.result is None:
            raise RuntimeError(f"run for {self.tool_name} has neither a result nor an error")
        return self.result


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Ordered outcomes of one executor batch.

    ``runs`` follows submission order, never completion order.
    """

    runs: tuple[ToolRun, ...] = ()
    status: BatchStatus = BatchStatus.COMPLETED

    def __len__(self) -> int:
        return len(self.runs)

    def __iter__(self) -> Iterator[ToolRun]:
        return iter(self.runs)

    def outcomes(self) -> list[LintResult | ToolError]:
        """Return one ``LintResult`` or ``ToolError`` per tool, in submission order."""

        return [run.outcome for run in self.runs]

    def results(self) -> list[LintResult]:
        return [run.result for run in self.runs if run.result is not None]

    def errors(self) -> list[ToolError]:
        return [run.error for run in self.runs if run.error is not None]

    def issues(self) -> list[LintIssue]:
        return [issue for result in self.results() for issue in result.issues]

    def issue_counts(self) -> dict[IssueSeverity, int]:
        """Return issue totals per severity, most severe first."""

        counts = {severity: 0 for severity in sorted(IssueSeverity, reverse=True)}
        for issue in self.issues():
            counts[issue.severity] += 1
        return counts

    def exceeds(self, level: IssueSeverity) -> bool:
        """Return ``True`` when any issue is at or above ``level``."""

        return any(issue.severity.at_least(level) for issue in self.issues())

    @property
    def has_errors(self) -> bool:
        return any(run.error is not None for run in self.runs)


__all__ = ["BatchResult", "BatchStatus", "ToolRun", "ToolState"]
