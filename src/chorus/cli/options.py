# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Typer parameter declarations and the option groups they populate."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated

import typer

from ..models import ToolType

PathsArgument = Annotated[
    list[Path] | None,
    typer.Argument(help="Files or directories to process (defaults to the current directory)."),
]
GitModifiedOption = Annotated[
    bool,
    typer.Option("--git-modified", "-g", help="Only process files git reports as modified or untracked."),
]
ToolsOption = Annotated[
    list[str] | None,
    typer.Option("--tools", help="Only run the named tools (repeatable or comma-separated)."),
]
TypeOption = Annotated[
    list[ToolType] | None,
    typer.Option("--type", "-t", help="Only run tools of this type (repeatable).", case_sensitive=False),
]
ExplicitOption = Annotated[
    bool,
    typer.Option("--explicit", help="Pass the given paths to tools verbatim, without expansion."),
]
CheckOption = Annotated[
    bool,
    typer.Option("--check", "-c", help="Report problems without modifying files."),
]


@dataclass(slots=True)
class GlobalOptions:
    """Options accepted by the application callback before any command."""

    verbose: bool = False
    no_emoji: bool = False
    no_color: bool = False
    jobs: int | None = None
    config_path: Path | None = None


@dataclass(slots=True)
class SelectionOptions:
    """Target and tool filters shared by the running commands."""

    paths: list[Path] = field(default_factory=list)
    git_modified: bool = False
    tools: list[str] = field(default_factory=list)
    types: list[ToolType] = field(default_factory=list)
    explicit: bool = False

    @classmethod
    def from_cli(
        cls,
        paths: list[Path] | None,
        *,
        git_modified: bool,
        tools: list[str] | None,
        types: list[ToolType] | None,
        explicit: bool,
    ) -> SelectionOptions:
        """Normalise raw Typer values; ``--tools a,b`` and ``--tools a --tools b`` are equivalent."""

        names = [name.strip() for entry in tools or () for name in entry.split(",") if name.strip()]
        return cls(
            paths=list(paths or []),
            git_modified=git_modified,
            tools=list(dict.fromkeys(names)),
            types=list(dict.fromkeys(types or [])),
            explicit=explicit,
        )


__all__ = [
    "CheckOption",
    "ExplicitOption",
    "GitModifiedOption",
    "GlobalOptions",
    "PathsArgument",
    "SelectionOptions",
    "ToolsOption",
    "TypeOption",
]
