# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Best-effort framework heuristics based on marker files."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable
from pathlib import Path
from typing import Final

from ..languages import Framework, Language

LOGGER = logging.getLogger(__name__)

_JS_FAMILY: Final[frozenset[Language]] = frozenset({Language.JAVASCRIPT, Language.TYPESCRIPT})


def _file_contains(path: Path, *needles: str) -> bool:
    """Return ``True`` when ``path`` exists and contains any needle (case-insensitive)."""

    if not path.is_file():
        return False
    try:
        content = path.read_text(encoding="utf-8", errors="ignore").lower()
    except OSError:
        return False
    return any(needle.lower() in content for needle in needles)


def _any_exists(directory: Path, *relative: str) -> bool:
    return any((directory / entry).exists() for entry in relative)


def is_react_project(directory: Path) -> bool:
    if _file_contains(directory / "package.json", '"react":', '"react-dom":'):
        return True
    if _any_exists(directory, "src/App.jsx", "src/App.js", "src/App.tsx"):
        return True
    return _file_contains(directory / ".babelrc", "@babel/preset-react")


def is_vue_project(directory: Path) -> bool:
    if _file_contains(directory / "package.json", '"vue":'):
        return True
    return _any_exists(directory, "src/App.vue", "vue.config.js")


def is_angular_project(directory: Path) -> bool:
    if _any_exists(directory, "angular.json", ".angular-cli.json"):
        return True
    return _file_contains(directory / "package.json", '"@angular/core":')


def is_django_project(directory: Path) -> bool:
    if _file_contains(directory / "manage.py", "django"):
        return True
    return _file_contains(directory / "requirements.txt", "django") or _file_contains(
        directory / "pyproject.toml", '"django', "'django", "django ="
    )


def is_flask_project(directory: Path) -> bool:
    if _file_contains(directory / "app.py", "from flask import", "import flask") or _file_contains(
        directory / "wsgi.py", "flask"
    ):
        return True
    return _file_contains(directory / "requirements.txt", "flask")


def is_rails_project(directory: Path) -> bool:
    if _file_contains(directory / "Gemfile", "gem 'rails'", 'gem "rails"'):
        return True
    return _any_exists(directory, "config/routes.rb") and _any_exists(directory, "app/controllers") and _any_exists(
        directory, "app/models"
    )


# (framework, languages that must be present, predicate)
FRAMEWORK_RULES: Final[tuple[tuple[Framework, frozenset[Language], Callable[[Path], bool]], ...]] = (
    (Framework.REACT, _JS_FAMILY, is_react_project),
    (Framework.VUE, _JS_FAMILY, is_vue_project),
    (Framework.ANGULAR, frozenset({Language.TYPESCRIPT}), is_angular_project),
    (Framework.DJANGO, frozenset({Language.PYTHON}), is_django_project),
    (Framework.FLASK, frozenset({Language.PYTHON}), is_flask_project),
    (Framework.RAILS, frozenset({Language.RUBY}), is_rails_project),
)


def detect_frameworks(directories: Iterable[Path], languages: Collection[Language]) -> list[Framework]:
    """Return frameworks found in any of ``directories``.

    A framework is only considered when one of its gating languages was
    detected, which keeps a stray ``package.json`` in a Python project from
    reporting React.

    Args:
        directories: Directories to inspect for marker files.
        languages: Languages detected in the scanned files.

    Returns:
        list[Framework]: Frameworks in rule order, without duplicates.
    """

    found: list[Framework] = []
    if not languages:
        return found
    present = set(languages)
    candidates = list(directories)
    for framework, gate, predicate in FRAMEWORK_RULES:
        if not gate & present:
            continue
        if any(predicate(directory) for directory in candidates):
            LOGGER.debug("detected %s framework", framework)
            found.append(framework)
    return found


__all__ = [
    "FRAMEWORK_RULES",
    "detect_frameworks",
    "is_angular_project",
    "is_django_project",
    "is_flask_project",
    "is_rails_project",
    "is_react_project",
    "is_vue_project",
]
