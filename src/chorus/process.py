# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import logging
import os
import shlex
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists built by
# tool wrappers and never routed through a shell.
import subprocess  # nosec B404
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Execution settings for one subprocess invocation.

    Attributes:
        cwd: Working directory for the child process.
        env: Variables layered over ``os.environ``; ``None`` inherits it untouched.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit.
        capture_output: Capture stdout and stderr instead of inheriting them.
        discard_stdin: Attach ``/dev/null`` to stdin so tools never block on input.
    """

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = False
    capture_output: bool = True
    discard_stdin: bool = True

    def merged_env(self) -> dict[str, str] | None:
        """Return the full child environment, or ``None`` to inherit the parent's."""

        if not self.env:
            return None
        merged = dict(os.environ)
        merged.update({str(key): str(value) for key, value in self.env.items()})
        return merged


CommandRunner = Callable[[Sequence[str], CommandOptions], CompletedProcess[str]]


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def find_executable(cmd: str | Path) -> str | None:
    """Return the fully-qualified path to ``cmd`` if it can be executed.

    Args:
        cmd: Executable name to resolve on ``PATH``, or an explicit path.

    Returns:
        str | None: Absolute path to the executable, or ``None`` when not found.
    """

    candidate = Path(cmd)
    if candidate.is_absolute() or len(candidate.parts) > 1:
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate.resolve())
        return None
    return shutil.which(str(cmd))


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable in ``args`` and return a fresh argument list.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    resolved = find_executable(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(args: Sequence[str], options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Args:
        args: Command and argument sequence to execute.
        options: Execution settings; defaults capture output and discard stdin.

    Returns:
        CompletedProcess[str]: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        SubprocessExecutionError: When ``check`` is true and the process exits
            with a non-zero status.
    """

    resolved_options = options or CommandOptions()
    normalized = _normalize_args(args)
    LOGGER.debug("running %s (cwd=%s)", shlex.join(normalized), resolved_options.cwd or ".")
    completed: CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
        env=resolved_options.merged_env(),
        check=False,
        capture_output=resolved_options.capture_output,
        text=True,
        errors="replace",
        stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
    )
    if resolved_options.check and completed.returncode != 0:
        raise SubprocessExecutionError(normalized, completed.returncode, completed.stdout, completed.stderr)
    return completed


def first_output_line(completed: CompletedProcess[str]) -> str | None:
    """Return the first non-blank line of stdout (or stderr when stdout is empty)."""

    for stream in (completed.stdout, completed.stderr):
        for line in (stream or "").splitlines():
            stripped = line.strip()
            if stripped:
                return stripped
    return None


__all__ = [
    "CommandOptions",
    "CommandRunner",
    "SubprocessExecutionError",
    "find_executable",
    "first_output_line",
    "run_command",
]
