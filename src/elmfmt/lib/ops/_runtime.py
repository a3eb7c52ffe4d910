"""Shared project/config resolution for operation handlers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from elmfmt.lib.config._paths import resolve_project_root
from elmfmt.lib.config.settings import ElmFormatConfig, load_config


@dataclass(frozen=True, slots=True)
class OperationRuntime:
    project_root: Path
    config: ElmFormatConfig


def build_runtime(
    *,
    project_root: str | None = None,
    file_path: str | None = None,
) -> OperationRuntime:
    """Resolve the project root for `file_path` (or cwd) and load its config."""

    explicit = Path(project_root) if project_root else None
    start = Path(file_path) if file_path else None
    root = resolve_project_root(start=start, explicit=explicit)
    return OperationRuntime(project_root=root, config=load_config(root))
