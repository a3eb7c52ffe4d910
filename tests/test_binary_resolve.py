"""Binary and flag resolution, including project-local lookup."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from elmfmt.lib.config.settings import ElmFormatConfig
from elmfmt.lib.domain import ResolvedBinary
from elmfmt.lib.exec.binary import DependencyDirResolver, resolve_binary

from conftest import write_executable

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX executable bits")


def _install_local_binary(project: Path) -> Path:
    return write_executable(project / "node_modules" / ".bin" / "elm-format", "#!/bin/sh\n")


@dataclass
class _RecordingResolver:
    found: Path | None = None
    calls: list[tuple[str, Path]] = field(default_factory=list)

    def find(self, binary_name: str, start: Path) -> Path | None:
        self.calls.append((binary_name, start))
        return self.found


def test_configured_binary_gets_version_flag() -> None:
    resolved = resolve_binary(ElmFormatConfig())

    assert resolved == ResolvedBinary(
        path="elm-format",
        args=("--elm-version", "0.19"),
        local=False,
    )


def test_disabled_version_flag_is_omitted() -> None:
    resolved = resolve_binary(ElmFormatConfig(binary="/opt/elm-format", elm_version=None))

    assert resolved == ResolvedBinary(path="/opt/elm-format", args=())


def test_prefer_local_false_never_searches() -> None:
    resolver = _RecordingResolver(found=Path("/somewhere/elm-format"))

    resolved = resolve_binary(ElmFormatConfig(elm_version="0.18"), resolver=resolver)

    assert resolver.calls == []
    assert resolved.args == ("--elm-version", "0.18")


def test_local_binary_overrides_path_and_drops_version() -> None:
    resolver = _RecordingResolver(found=Path("/proj/node_modules/.bin/elm-format"))
    config = ElmFormatConfig(binary="/usr/bin/elm-format", prefer_local_binary=True)

    resolved = resolve_binary(config, file_path=Path("/proj/src/Main.elm"), resolver=resolver)

    assert resolved == ResolvedBinary(
        path="/proj/node_modules/.bin/elm-format",
        args=(),
        local=True,
    )
    assert resolver.calls == [("elm-format", Path("/proj/src/Main.elm"))]


def test_local_lookup_miss_falls_back_to_configured_binary() -> None:
    config = ElmFormatConfig(prefer_local_binary=True)

    resolved = resolve_binary(config, file_path=Path("/x/Main.elm"), resolver=_RecordingResolver())

    assert resolved == ResolvedBinary(path="elm-format", args=("--elm-version", "0.19"))


def test_local_lookup_defaults_to_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    resolver = _RecordingResolver()

    resolve_binary(ElmFormatConfig(prefer_local_binary=True), resolver=resolver)

    assert resolver.calls == [("elm-format", Path.cwd())]


@posix_only
def test_dependency_dir_resolver_walks_up(project: Path) -> None:
    local = _install_local_binary(project)
    nested = project / "src" / "Page" / "Home.elm"
    nested.parent.mkdir(parents=True)
    nested.touch()

    assert DependencyDirResolver().find("elm-format", nested) == local.resolve()


@posix_only
def test_dependency_dir_resolver_skips_non_executable(project: Path) -> None:
    candidate = project / "node_modules" / ".bin" / "elm-format"
    candidate.parent.mkdir(parents=True)
    candidate.write_text("", encoding="utf-8")
    candidate.chmod(0o644)

    assert DependencyDirResolver().find("elm-format", project / "src") is None


@posix_only
def test_dependency_dir_resolver_custom_dirs(project: Path) -> None:
    local = write_executable(project / "tools" / "bin" / "elm-format", "#!/bin/sh\n")

    resolver = DependencyDirResolver(dependency_dirs=("node_modules/.bin", "tools/bin"))

    assert resolver.find("elm-format", project / "src") == local.resolve()


@posix_only
def test_resolve_binary_end_to_end_with_local_install(project: Path) -> None:
    local = _install_local_binary(project)
    config = ElmFormatConfig(binary="/usr/local/bin/elm-format", prefer_local_binary=True)

    resolved = resolve_binary(config, file_path=project / "src" / "Main.elm")

    assert resolved.path == str(local.resolve())
    assert resolved.local is True
    assert "--elm-version" not in resolved.args
