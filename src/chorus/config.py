# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for chorus runs."""

from __future__ import annotations

import math
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import THEMES
from .languages import Language
from .models import ToolConfig
from .severity import IssueSeverity
from .tools.base import LintTool


def default_parallel_jobs() -> int:
    """Return 75% of available CPU cores (minimum of 1)."""
    cores = os.cpu_count() or 1
    proposed = max(1, math.floor(cores * 0.75))
    return proposed


class GeneralConfig(BaseModel):
    """Run-wide behaviour shared by every command."""

    model_config = ConfigDict(validate_assignment=True)

    fail_level: IssueSeverity = IssueSeverity.ERROR
    use_relative_paths: bool = True
    jobs: int | None = Field(default=None, ge=1)

    @field_validator("fail_level", mode="before")
    @classmethod
    def _coerce_fail_level(cls, value: object) -> object:
        if isinstance(value, str):
            return IssueSeverity.parse(value)
        return value

    @property
    def effective_jobs(self) -> int:
        return self.jobs if self.jobs is not None else default_parallel_jobs()


class StyleConfig(BaseModel):
    """Console presentation preferences."""

    model_config = ConfigDict(validate_assignment=True)

    theme: str = "default"
    use_emoji: bool = True
    use_color: bool = True

    @field_validator("theme")
    @classmethod
    def _known_theme(cls, value: str) -> str:
        if value not in THEMES:
            choices = ", ".join(sorted(THEMES))
            raise ValueError(f"unknown theme '{value}' (expected one of: {choices})")
        return value


class LanguageSettings(BaseModel):
    """Settings applied to every tool that supports a language.

    Tools opt in by declaring the command-line options that carry each
    setting; tools without such options ignore them.
    """

    model_config = ConfigDict(validate_assignment=True)

    line_length: int | None = Field(default=None, ge=1)
    ignore_rules: list[str] = Field(default_factory=list)
    enable_rules: list[str] = Field(default_factory=list)


class OutputConfig(BaseModel):
    """Controls how results are rendered."""

    model_config = ConfigDict(validate_assignment=True)

    show_line_numbers: bool = True
    show_file_paths: bool = True
    max_issues_per_category: int = Field(default=50, ge=0)
    show_code_snippets: bool = False


class ChorusConfig(BaseModel):
    """Top-level configuration assembled from the global and project files."""

    model_config = ConfigDict(validate_assignment=True)

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    style: StyleConfig = Field(default_factory=StyleConfig)
    languages: dict[Language, LanguageSettings] = Field(default_factory=dict)
    tools: dict[str, ToolConfig] = Field(default_factory=dict)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("languages", mode="before")
    @classmethod
    def _coerce_language_keys(cls, value: object) -> object:
        # TOML tables are written with lower-case language names.
        if isinstance(value, dict):
            return {key.lower() if isinstance(key, str) else key: item for key, item in value.items()}
        return value

    def tool_config(self, name: str) -> ToolConfig:
        """Return the configured settings for ``name``, or the defaults."""
        return self.tools.get(name, ToolConfig())

    def language_settings(self, language: Language) -> LanguageSettings:
        return self.languages.get(language, LanguageSettings())

    def resolve(self, tool: LintTool) -> ToolConfig:
        """Return ``tool``'s settings with its languages' options prepended to ``extra_args``.

        Language settings are translated through the tool's
        ``line_length_option``, ``ignore_option`` and ``enable_option``
        attributes. User-supplied ``extra_args`` follow the generated ones.

        Args:
            tool: Tool about to be dispatched.

        Returns:
            ToolConfig: Effective configuration for this run.
        """

        base = self.tool_config(tool.name)
        settings = [self.languages[lang] for lang in sorted(tool.languages, key=str) if lang in self.languages]
        generated = language_arguments(tool, settings)
        if not generated:
            return base
        return base.model_copy(update={"extra_args": (*generated, *base.extra_args)})


def language_arguments(tool: LintTool, settings: list[LanguageSettings]) -> list[str]:
    """Translate language ``settings`` into command-line options ``tool`` understands."""

    line_length = next((entry.line_length for entry in settings if entry.line_length is not None), None)
    ignored = list(dict.fromkeys(rule for entry in settings for rule in entry.ignore_rules))
    enabled = list(dict.fromkeys(rule for entry in settings for rule in entry.enable_rules))

    args: list[str] = []
    line_length_option = getattr(tool, "line_length_option", None)
    if line_length_option and line_length is not None:
        args.extend([line_length_option, str(line_length)])
    ignore_option = getattr(tool, "ignore_option", None)
    if ignore_option and ignored:
        args.extend([ignore_option, ",".join(ignored)])
    enable_option = getattr(tool, "enable_option", None)
    if enable_option and enabled:
        args.extend([enable_option, ",".join(enabled)])
    return args


__all__ = [
    "ChorusConfig",
    "GeneralConfig",
    "LanguageSettings",
    "OutputConfig",
    "StyleConfig",
    "default_parallel_jobs",
    "language_arguments",
]
