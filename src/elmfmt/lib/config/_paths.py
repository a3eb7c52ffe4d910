"""Path resolution helpers for project-scoped config files."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILE_NAME = "elmfmt.toml"
_PROJECT_MARKERS: tuple[str, ...] = ("elm.json", CONFIG_FILE_NAME)


def resolve_project_root(start: Path | None = None, explicit: Path | None = None) -> Path:
    """Resolve the project root that owns `elmfmt.toml`.

    Precedence:
    1. Explicit function argument.
    2. `ELMFMT_PROJECT_ROOT` environment variable.
    3. `start` (a file or directory, default cwd) or the nearest ancestor
       containing `elm.json`, `elmfmt.toml`, or a `.git` entry.
    4. The starting directory itself.
    """

    if explicit is not None:
        return explicit.expanduser().resolve()

    env_root = os.getenv("ELMFMT_PROJECT_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    origin = (start or Path.cwd()).expanduser().resolve()
    if not origin.is_dir():
        origin = origin.parent

    for candidate in (origin, *origin.parents):
        if any((candidate / marker).is_file() for marker in _PROJECT_MARKERS):
            return candidate
        # A .git entry (file for worktree/submodule, directory for a standalone
        # repo) marks a repo boundary.
        if (candidate / ".git").exists():
            return candidate

    return origin


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_FILE_NAME
