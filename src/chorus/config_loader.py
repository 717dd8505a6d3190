# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered loading of the global and project configuration files."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .config import ChorusConfig
from .constants import CHORUS_DIR_NAME, PROJECT_CONFIG_FILENAMES
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

GLOBAL_CONFIG_FILENAME: Final[str] = "config.toml"
MERGED_SECTIONS: Final[tuple[str, ...]] = ("languages", "tools")


def global_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the location of the user-wide configuration file.

    ``$XDG_CONFIG_HOME/chorus/config.toml`` when the variable is set and
    non-empty, otherwise ``~/.config/chorus/config.toml``.
    """

    environ = os.environ if env is None else env
    base = environ.get("XDG_CONFIG_HOME")
    root = Path(base).expanduser() if base else Path.home() / ".config"
    return root / CHORUS_DIR_NAME / GLOBAL_CONFIG_FILENAME


def find_project_config(start: Path) -> Path | None:
    """Return the nearest project configuration file at or above ``start``."""

    directory = start.absolute()
    if not directory.is_dir():
        directory = directory.parent
    for candidate_dir in (directory, *directory.parents):
        for filename in PROJECT_CONFIG_FILENAMES:
            candidate = candidate_dir / filename
            if candidate.is_file():
                return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse ``path`` as TOML.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(path, f"invalid TOML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(path, f"cannot read configuration: {exc}") from exc


def merge_documents(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay ``override`` onto ``base``.

    ``general``, ``style`` and ``output`` tables are replaced wholesale;
    ``languages`` and ``tools`` are merged per key so a project file can
    override one tool without repeating the others.
    """

    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in MERGED_SECTIONS and isinstance(value, Mapping):
            current = merged.get(key)
            section = dict(current) if isinstance(current, Mapping) else {}
            section.update(value)
            merged[key] = section
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Load :class:`ChorusConfig` from an ordered list of TOML files.

    Missing files are skipped; later files take precedence.
    """

    def __init__(self, sources: Sequence[Path]) -> None:
        self._sources = list(sources)

    @property
    def sources(self) -> list[Path]:
        return list(self._sources)

    @classmethod
    def for_root(
        cls,
        project_root: Path,
        *,
        user_config: Path | None = None,
        project_config: Path | None = None,
    ) -> ConfigLoader:
        """Build a loader for the global file followed by the project file.

        Args:
            project_root: Directory the project file search starts from.
            user_config: Optional override for the global file location.
            project_config: Optional explicit project file.

        Returns:
            ConfigLoader: Loader with global-then-project precedence.
        """

        sources = [user_config if user_config is not None else global_config_path()]
        project_file = project_config if project_config is not None else find_project_config(project_root)
        if project_file is not None:
            sources.append(project_file)
        return cls(sources)

    def load(self) -> ChorusConfig:
        """Return the merged configuration.

        Raises:
            ConfigError: If a file is unreadable, is not valid TOML, or does
                not match the configuration schema.
        """

        document: dict[str, Any] = {}
        last_path: Path | None = None
        for path in self._sources:
            if not path.is_file():
                continue
            LOGGER.debug("loading configuration from %s", path)
            fragment = read_toml(path)
            _validate(fragment, path)
            document = merge_documents(document, fragment)
            last_path = path
        return _validate(document, last_path)


def _validate(document: Mapping[str, Any], path: Path | None) -> ChorusConfig:
    try:
        return ChorusConfig.model_validate(document)
    except ValidationError as exc:
        raise ConfigError(path, _summarise(exc)) from exc


def _summarise(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def load_config(project_root: Path) -> ChorusConfig:
    """Load configuration for ``project_root`` using the default file locations."""
    return ConfigLoader.for_root(project_root).load()


__all__ = [
    "ConfigLoader",
    "find_project_config",
    "global_config_path",
    "load_config",
    "merge_documents",
    "read_toml",
]
