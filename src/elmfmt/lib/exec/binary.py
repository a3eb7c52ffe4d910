"""Formatter binary and argument resolution."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from elmfmt.lib.config.settings import ElmFormatConfig
from elmfmt.lib.domain import ResolvedBinary

logger = structlog.get_logger(__name__)

ELM_VERSION_FLAG = "--elm-version"


class LocalBinaryResolver(Protocol):
    """Strategy for finding a project-local formatter executable."""

    def find(self, binary_name: str, start: Path) -> Path | None: ...


@dataclass(frozen=True, slots=True)
class DependencyDirResolver:
    """Walk up from `start` checking dependency directories for the binary."""

    dependency_dirs: tuple[str, ...] = ("node_modules/.bin",)

    def _candidate_names(self, binary_name: str) -> tuple[str, ...]:
        if sys.platform == "win32":
            return (f"{binary_name}.cmd", f"{binary_name}.exe", binary_name)
        return (binary_name,)

    def find(self, binary_name: str, start: Path) -> Path | None:
        origin = start.expanduser().resolve()
        if not origin.is_dir():
            origin = origin.parent

        names = self._candidate_names(binary_name)
        for directory in (origin, *origin.parents):
            for dependency_dir in self.dependency_dirs:
                for name in names:
                    candidate = directory / dependency_dir / name
                    if candidate.is_file() and os.access(candidate, os.X_OK):
                        return candidate
        return None


def version_args(elm_version: str | None) -> tuple[str, ...]:
    if not elm_version:
        return ()
    return (ELM_VERSION_FLAG, elm_version)


def resolve_binary(
    config: ElmFormatConfig,
    file_path: Path | None = None,
    resolver: LocalBinaryResolver | None = None,
) -> ResolvedBinary:
    """Pick the formatter executable and the flags to pass after `--stdin`.

    A local binary found through `resolver` wins over `config.binary` and never
    gets a version flag: it is assumed to match the project's Elm version.
    """

    if config.prefer_local_binary:
        active_resolver = resolver or DependencyDirResolver(config.local_binary_dirs)
        start = file_path if file_path is not None else Path.cwd()
        local = active_resolver.find(Path(config.binary).name, start)
        if local is not None:
            logger.debug("Using project-local formatter binary.", path=str(local))
            return ResolvedBinary(path=str(local), args=(), local=True)
        logger.debug("No project-local formatter binary found.", start=str(start))

    return ResolvedBinary(path=config.binary, args=version_args(config.elm_version))
