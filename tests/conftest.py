"""Shared pytest fixtures for elmfmt tests."""

from __future__ import annotations

import os
import stat
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
FAKE_ELM_FORMAT = PACKAGE_ROOT / "tests" / "fake_elm_format.py"


@dataclass(frozen=True, slots=True)
class CliResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


@pytest.fixture(autouse=True)
def _isolate_elmfmt_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in tuple(os.environ):
        if key.startswith("ELMFMT_") or key.startswith("FAKE_ELM_FORMAT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def package_root() -> Path:
    return PACKAGE_ROOT


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An Elm project root with an empty elm.json marker."""

    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "elm.json").write_text("{}\n", encoding="utf-8")
    return root


def write_executable(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def make_fake_binary() -> Callable[[Path], Path]:
    """Create an executable `elm-format` wrapper around fake_elm_format.py."""

    def _make(directory: Path) -> Path:
        return write_executable(
            directory / "elm-format",
            f'#!/bin/sh\nexec "{sys.executable}" "{FAKE_ELM_FORMAT}" "$@"\n',
        )

    return _make


@pytest.fixture
def fake_binary(tmp_path: Path, make_fake_binary: Callable[[Path], Path]) -> Path:
    return make_fake_binary(tmp_path / "bin")


@pytest.fixture
def cli_env(package_root: Path, fake_binary: Path) -> dict[str, str]:
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith(("ELMFMT_", "FAKE_ELM_FORMAT_"))
    }
    existing = env.get("PYTHONPATH", "")
    root = str(package_root / "src")
    env["PYTHONPATH"] = root if not existing else f"{root}{os.pathsep}{existing}"
    env["ELMFMT_BINARY"] = str(fake_binary)
    return env


@pytest.fixture
def run_elmfmt(project: Path, cli_env: dict[str, str]) -> Callable[..., CliResult]:
    def _run(
        args: list[str],
        *,
        stdin: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float = 30.0,
    ) -> CliResult:
        completed = subprocess.run(
            [sys.executable, "-m", "elmfmt", *args],
            cwd=project,
            env={**cli_env, **(env or {})},
            input=stdin,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
        return CliResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    return _run
