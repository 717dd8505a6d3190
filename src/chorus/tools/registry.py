# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool registry providing lookup by name, language and type."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from ..languages import Language
from ..models import ToolInfo, ToolType
from .base import LintTool, describe_tool

LOGGER = logging.getLogger(__name__)


def _sort_key(tool: LintTool) -> tuple[str, str]:
    languages = ",".join(sorted(language.value for language in tool.languages))
    return languages, tool.name


class ToolRegistry(Mapping[str, LintTool]):
    """Catalog of tool descriptors keyed by unique name.

    ``ToolRegistry`` behaves like a read-only mapping from tool names to
    :class:`LintTool` instances. It is populated once at startup and shared
    read-only afterwards; every query returns a fresh list sorted by the
    tool's comma-joined language values and then its name.
    """

    def __init__(self, tools: Iterable[LintTool] = ()) -> None:
        self._tools: dict[str, LintTool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: LintTool) -> bool:
        """Register ``tool`` unless a tool with the same name already exists.

        Args:
            tool: Tool descriptor to insert.

        Returns:
            bool: ``True`` when the tool was added, ``False`` when the name was
            already taken and the earlier registration was kept.
        """

        if tool.name in self._tools:
            LOGGER.debug("tool %s already registered; keeping the first registration", tool.name)
            return False
        self._tools[tool.name] = tool
        LOGGER.debug("registered tool %s (%s)", tool.name, tool.tool_type)
        return True

    def all(self) -> list[LintTool]:
        """Return every registered tool."""

        return sorted(self._tools.values(), key=_sort_key)

    def by_name(self, name: str) -> LintTool | None:
        """Return the tool named ``name``, or ``None`` when unknown."""

        return self._tools.get(name)

    def for_language(self, language: Language) -> list[LintTool]:
        """Return tools that support ``language``."""

        return [tool for tool in self.all() if language in tool.languages]

    def for_type(self, tool_type: ToolType) -> list[LintTool]:
        """Return tools of ``tool_type``."""

        return [tool for tool in self.all() if tool.tool_type == tool_type]

    def for_language_and_type(self, language: Language, tool_type: ToolType) -> list[LintTool]:
        """Return tools that support ``language`` and are of ``tool_type``."""

        return [tool for tool in self.all() if language in tool.languages and tool.tool_type == tool_type]

    def tools_for_file(self, path: Path) -> list[LintTool]:
        """Return tools whose ``can_handle`` accepts ``path``."""

        return [tool for tool in self.all() if tool.can_handle(path)]

    def best_tool_for_file(self, path: Path, tool_type: ToolType) -> LintTool | None:
        """Return the highest-priority tool of ``tool_type`` that can handle ``path``.

        Ties keep the registry's sorted order. Unavailable tools are skipped.

        Args:
            path: File the tool must accept.
            tool_type: Required tool role.

        Returns:
            LintTool | None: Best candidate, or ``None`` when nothing qualifies.
        """

        best: LintTool | None = None
        for tool in self.all():
            if tool.tool_type != tool_type or not tool.can_handle(path) or not tool.is_available():
                continue
            if best is None or getattr(tool, "priority", 0) > getattr(best, "priority", 0):
                best = tool
        return best

    def tool_info(self) -> list[ToolInfo]:
        """Return display snapshots for every tool, probing availability and version."""

        return [describe_tool(tool) for tool in self.all()]

    def names(self) -> list[str]:
        """Return registered tool names in sorted registry order."""

        return [tool.name for tool in self.all()]

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __getitem__(self, name: str) -> LintTool:
        return self._tools[name]


__all__ = ["ToolRegistry"]
