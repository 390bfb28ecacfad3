"""
Project root and `.env` handling.

Catalog and store paths in settings are relative (`data/pois.json`,
`.cache/trono`) and resolve against the checkout that holds them, not the
working directory the CLI happens to run from. The root is, in order:
`TRONO_PROJECT_ROOT`, then the nearest ancestor of the cwd holding a
`pyproject.toml` or a `data/pois.json`, then the cwd itself.

A `.env` at that root is loaded once; variables already set win.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ROOT_MARKERS = ("pyproject.toml", "data/pois.json")


@lru_cache
def get_project_root() -> Path:
    override = os.getenv("TRONO_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()

    cwd = Path.cwd().resolve()
    for candidate in (cwd, *cwd.parents):
        if any((candidate / marker).is_file() for marker in ROOT_MARKERS):
            return candidate
    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `<root>/.env` once; returns its path, or None when there is none."""
    env_path = get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_project_root() / p).resolve()
