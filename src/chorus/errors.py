# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by detection, tooling and configuration."""

from __future__ import annotations

from pathlib import Path


class ChorusError(Exception):
    """Base class for all errors raised by chorus."""


class DetectionError(ChorusError):
    """Raised when project detection cannot produce a usable result."""


class InvalidDirectoryError(DetectionError):
    """Raised when an input path is neither an existing file nor a directory."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Invalid directory: {path}")
        self.path = path


class DetectionFailedError(DetectionError):
    """Raised when no files could be classified."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Detection failed: {reason}")
        self.reason = reason


class ToolError(ChorusError):
    """Base class for per-tool failures.

    Tool errors are values as far as the executor is concerned: they are
    recorded against the tool that produced them and never abort a batch.
    """

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class ToolNotFoundError(ToolError):
    """Raised when a tool's backing executable cannot be located."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Tool not found: {name}")


class ExecutionFailedError(ToolError):
    """Raised when a tool could not be launched or crashed while running."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(name, f"Tool execution failed: {name}: {message}")
        self.message = message


class ToolFailedError(ToolError):
    """Raised when a tool exits with a status that is not an issue signal."""

    def __init__(self, name: str, exit_code: int, message: str) -> None:
        super().__init__(name, f"Tool {name} failed with exit code {exit_code}: {message}")
        self.exit_code = exit_code
        self.message = message


class ConfigError(ChorusError):
    """Raised when a configuration file cannot be read or validated."""

    def __init__(self, path: Path | None, message: str) -> None:
        location = str(path) if path is not None else "<config>"
        super().__init__(f"{location}: {message}")
        self.path = path
        self.message = message


__all__ = [
    "ChorusError",
    "ConfigError",
    "DetectionError",
    "DetectionFailedError",
    "ExecutionFailedError",
    "InvalidDirectoryError",
    "ToolError",
    "ToolFailedError",
    "ToolNotFoundError",
]
