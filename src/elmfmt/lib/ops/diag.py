"""Diagnostics for formatter binary and config resolution."""

from __future__ import annotations

import asyncio
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from elmfmt.lib.config._paths import config_path
from elmfmt.lib.exec.binary import resolve_binary
from elmfmt.lib.exec.invoke import STDIN_FLAG
from elmfmt.lib.ops._runtime import build_runtime
from elmfmt.lib.ops.registry import OperationSpec, operation


@dataclass(frozen=True, slots=True)
class DoctorInput:
    file_path: str | None = None
    project_root: str | None = None


@dataclass(frozen=True, slots=True)
class DoctorOutput:
    ok: bool
    project_root: str
    config_file: str | None
    binary: str
    binary_location: str | None
    local_binary: bool
    command: tuple[str, ...]
    warnings: tuple[str, ...] = ()

    def format_text(self) -> str:
        """Key-value health check output for text output mode."""
        from elmfmt.cli.format_helpers import kv_block

        pairs: list[tuple[str, str | None]] = [
            ("ok", "ok" if self.ok else "WARNINGS"),
            ("project_root", self.project_root),
            ("config_file", self.config_file or "(none, using defaults)"),
            ("binary", self.binary),
            ("binary_location", self.binary_location),
            ("local_binary", "yes" if self.local_binary else "no"),
            ("command", " ".join(self.command)),
        ]
        result = kv_block(pairs)
        for warning in self.warnings:
            result += f"\nwarning: {warning}"
        return result


def _locate_binary(binary: str) -> Path | None:
    candidate = Path(binary).expanduser()
    if candidate.parent != Path(".") or candidate.is_absolute():
        return candidate if candidate.exists() else None
    found = shutil.which(binary)
    return Path(found) if found is not None else None


def doctor_sync(payload: DoctorInput) -> DoctorOutput:
    runtime = build_runtime(project_root=payload.project_root, file_path=payload.file_path)
    file_path = Path(payload.file_path) if payload.file_path else None
    resolved = resolve_binary(runtime.config, file_path=file_path)

    warnings: list[str] = []
    location = _locate_binary(resolved.path)
    if location is None:
        warnings.append(
            f"elm-format binary '{resolved.path}' was not found; install it or set "
            "`binary` in elmfmt.toml."
        )
    elif not location.is_file() or not os.access(location, os.X_OK):
        warnings.append(f"elm-format binary '{location}' is not executable.")

    if runtime.config.prefer_local_binary and not resolved.local:
        warnings.append(
            "prefer_local_binary is set but no local binary was found under "
            + ", ".join(runtime.config.local_binary_dirs)
        )

    path = config_path(runtime.project_root)
    return DoctorOutput(
        ok=not warnings,
        project_root=runtime.project_root.as_posix(),
        config_file=path.as_posix() if path.is_file() else None,
        binary=resolved.path,
        binary_location=location.as_posix() if location is not None else None,
        local_binary=resolved.local,
        command=(resolved.path, STDIN_FLAG, *resolved.args),
        warnings=tuple(warnings),
    )


async def doctor(payload: DoctorInput) -> DoctorOutput:
    return await asyncio.to_thread(doctor_sync, payload)


operation(
    OperationSpec[DoctorInput, DoctorOutput](
        name="doctor",
        handler=doctor,
        sync_handler=doctor_sync,
        input_type=DoctorInput,
        output_type=DoctorOutput,
        cli_group="doctor",
        cli_name="doctor",
        mcp_name="doctor",
        description="Check that the elm-format binary resolves and is executable.",
    )
)
