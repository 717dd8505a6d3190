# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Issue severity levels with a strict total order."""

from __future__ import annotations

from enum import Enum
from typing import Final


class IssueSeverity(str, Enum):
    """Severity attached to a :class:`chorus.models.LintIssue`.

    Members compare by rank rather than by their string value so that
    ``IssueSeverity.ERROR > IssueSeverity.WARNING`` holds.
    """

    STYLE = "style"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Return the ordinal used for comparisons (higher is more severe)."""

        return _RANKS[self]

    def at_least(self, threshold: IssueSeverity) -> bool:
        """Return ``True`` when this severity meets or exceeds ``threshold``."""

        return self.rank >= threshold.rank

    @classmethod
    def parse(cls, value: str) -> IssueSeverity:
        """Return the severity named by ``value`` (case-insensitive).

        Args:
            value: Severity name such as ``"warning"`` or ``"Error"``.

        Returns:
            IssueSeverity: Matching severity member.

        Raises:
            ValueError: If ``value`` does not name a severity.
        """

        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"unknown severity '{value}' (expected one of: {choices})")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


_RANKS: Final[dict[IssueSeverity, int]] = {
    IssueSeverity.STYLE: 0,
    IssueSeverity.INFO: 1,
    IssueSeverity.WARNING: 2,
    IssueSeverity.ERROR: 3,
}

__all__ = ["IssueSeverity"]
