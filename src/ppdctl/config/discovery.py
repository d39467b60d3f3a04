"""Locate the ppdctl.toml that applies to a directory.

A non-empty ``PPDCTL_CONFIG`` names the file outright. If that file does
not exist, no config is used; the walk-up is skipped. Otherwise the nearest
``ppdctl.toml`` in the directory or one of its ancestors wins.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "ppdctl.toml"
CONFIG_ENV_VAR = "PPDCTL_CONFIG"


def search_dirs(start: Path | None = None) -> Iterator[Path]:
    """*start* (default: cwd), resolved, then each parent up to the root."""
    origin = (start or Path.cwd()).resolve()
    yield origin
    yield from origin.parents


def find_config(start: Path | None = None) -> Path | None:
    """The config file governing *start*, or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    for directory in search_dirs(start):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
