# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""chorus CLI package exports."""

from __future__ import annotations

from typing import Final

from .app import app
from .runtime import CLIState

__all__: Final[list[str]] = ["CLIState", "app"]
