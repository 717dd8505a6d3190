# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures: fake tools, fake command runners and sample projects."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from chorus.languages import Language
from chorus.logging import get_console_manager
from chorus.models import LintIssue, LintResult, ToolConfig, ToolType
from chorus.process import CommandOptions


class FakeTool:
    """In-memory :class:`chorus.tools.LintTool` used instead of real binaries."""

    def __init__(
        self,
        name: str,
        *,
        languages: Sequence[Language] = (Language.PYTHON,),
        tool_type: ToolType = ToolType.LINTER,
        priority: int = 0,
        available: bool = True,
        extensions: Sequence[str] = ("py",),
        issues: Sequence[LintIssue] = (),
        raises: BaseException | None = None,
        delay: float = 0.0,
        success: bool = True,
        accepts_directories: bool = True,
    ) -> None:
        self.name = name
        self.description = f"fake {name}"
        self.tool_type = tool_type
        self.languages = frozenset(languages)
        self.priority = priority
        self.available = available
        self.extensions = frozenset(extensions)
        self.issues = tuple(issues)
        self.raises = raises
        self.delay = delay
        self.success = success
        self.accepts_directories = accepts_directories
        self.calls: list[tuple[list[Path], ToolConfig]] = []
        self._lock = threading.Lock()

    def can_handle(self, path: Path) -> bool:
        return path.suffix.lstrip(".") in self.extensions

    def execute(self, files: Sequence[Path], config: ToolConfig) -> LintResult:
        with self._lock:
            self.calls.append((list(files), config))
        if self.delay:
            time.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
        return LintResult(tool_name=self.name, success=self.success, issues=self.issues)

    def is_available(self) -> bool:
        return self.available

    def version(self) -> str | None:
        return "1.0.0" if self.available else None


class FakeRunner:
    """Command runner that records invocations and replays canned results."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], CommandOptions]] = []
        self.responses: list[tuple[Callable[[list[str]], bool], CompletedProcess[str] | BaseException]] = []

    def respond(
        self,
        predicate: Callable[[list[str]], bool],
        *,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        raises: BaseException | None = None,
    ) -> None:
        outcome: CompletedProcess[str] | BaseException = (
            raises if raises is not None else CompletedProcess([], returncode, stdout=stdout, stderr=stderr)
        )
        self.responses.append((predicate, outcome))

    def __call__(self, args: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
        command = list(args)
        self.calls.append((command, options))
        for predicate, outcome in reversed(self.responses):
            if predicate(command):
                if isinstance(outcome, BaseException):
                    raise outcome
                return CompletedProcess(command, outcome.returncode, stdout=outcome.stdout, stderr=outcome.stderr)
        return CompletedProcess(command, 0, stdout="", stderr="")

    @property
    def commands(self) -> list[list[str]]:
        return [command for command, _ in self.calls]


@pytest.fixture
def fake_tool() -> Callable[..., FakeTool]:
    """Return a factory for :class:`FakeTool` instances."""

    return FakeTool


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def resolver() -> Callable[[str], str | None]:
    """Executable resolver that finds every command under ``/usr/bin``."""

    return lambda name: f"/usr/bin/{name}"


@pytest.fixture
def no_git(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force the filesystem walk by making every git invocation fail."""

    monkeypatch.setattr("chorus.discovery.git.run_command", _missing_git)


def _missing_git(cmd: Sequence[str], options: CommandOptions | None = None) -> CompletedProcess[str]:
    raise FileNotFoundError(cmd[0])


@pytest.fixture
def write_files(tmp_path: Path) -> Callable[..., list[Path]]:
    """Return a helper creating ``relative -> content`` files under ``tmp_path``."""

    def _write(files: dict[str, str], base: Path | None = None) -> list[Path]:
        root = base or tmp_path
        created: list[Path] = []
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            created.append(path)
        return created

    return _write


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the global configuration at an empty directory and reset cached consoles."""

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    get_console_manager().clear()
