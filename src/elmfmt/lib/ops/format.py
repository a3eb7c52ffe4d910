"""Format operations: source text, files on disk, and binary resolution."""

from __future__ import annotations

import asyncio
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from elmfmt.lib.domain import (
    BinaryUnavailable,
    Formatted,
    FormatOutcome,
    FormatSyntaxError,
    ResolvedBinary,
)
from elmfmt.lib.exec.binary import resolve_binary
from elmfmt.lib.exec.invoke import format_source
from elmfmt.lib.ops._runtime import build_runtime
from elmfmt.lib.ops.registry import OperationSpec, operation

EXIT_OK = 0
EXIT_SYNTAX_ERROR = 1
EXIT_BINARY_UNAVAILABLE = 2
EXIT_FORMATTER_FAILED = 3
EXIT_WOULD_REFORMAT = 4


def exit_code_for(outcome: FormatOutcome) -> int:
    if isinstance(outcome, Formatted):
        return EXIT_OK
    if isinstance(outcome, FormatSyntaxError):
        return EXIT_SYNTAX_ERROR
    if isinstance(outcome, BinaryUnavailable):
        return EXIT_BINARY_UNAVAILABLE
    return EXIT_FORMATTER_FAILED


@dataclass(frozen=True, slots=True)
class FormatSourceInput:
    source: str
    file_path: str | None = None
    project_root: str | None = None


@dataclass(frozen=True, slots=True)
class FormatSourceOutput:
    outcome: FormatOutcome
    project_root: str
    file_path: str | None = None

    def format_text(self) -> str:
        return self.outcome.format_text()


@dataclass(frozen=True, slots=True)
class FormatFileInput:
    path: str
    write: bool = False
    check: bool = False
    project_root: str | None = None


@dataclass(frozen=True, slots=True)
class FormatFileOutput:
    path: str
    outcome: FormatOutcome
    changed: bool = False
    written: bool = False

    def format_text(self) -> str:
        if not isinstance(self.outcome, Formatted):
            return self.outcome.format_text()
        if self.written:
            return f"formatted: {self.path}"
        if self.changed:
            return f"would reformat: {self.path}"
        return f"unchanged: {self.path}"


@dataclass(frozen=True, slots=True)
class ResolveBinaryInput:
    file_path: str | None = None
    project_root: str | None = None


def _atomic_write_text(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def format_source_sync(payload: FormatSourceInput) -> FormatSourceOutput:
    runtime = build_runtime(project_root=payload.project_root, file_path=payload.file_path)
    file_path = Path(payload.file_path) if payload.file_path else None
    outcome = format_source(payload.source, runtime.config, file_path=file_path)
    return FormatSourceOutput(
        outcome=outcome,
        project_root=runtime.project_root.as_posix(),
        file_path=payload.file_path,
    )


def format_file_sync(payload: FormatFileInput) -> FormatFileOutput:
    if payload.write and payload.check:
        raise ValueError("Cannot combine --write with --check.")

    path = Path(payload.path).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {payload.path}")

    runtime = build_runtime(project_root=payload.project_root, file_path=str(path))
    # newline="" keeps CRLF intact so `changed` compares what is on disk.
    with path.open(encoding="utf-8", newline="") as handle:
        original = handle.read()
    outcome = format_source(original, runtime.config, file_path=path)
    if not isinstance(outcome, Formatted):
        return FormatFileOutput(path=path.as_posix(), outcome=outcome)

    changed = outcome.new_text != original
    written = False
    if payload.write and changed:
        _atomic_write_text(path, outcome.new_text)
        written = True
    return FormatFileOutput(
        path=path.as_posix(),
        outcome=outcome,
        changed=changed,
        written=written,
    )


def resolve_binary_sync(payload: ResolveBinaryInput) -> ResolvedBinary:
    runtime = build_runtime(project_root=payload.project_root, file_path=payload.file_path)
    file_path = Path(payload.file_path) if payload.file_path else None
    return resolve_binary(runtime.config, file_path=file_path)


async def format_source_async(payload: FormatSourceInput) -> FormatSourceOutput:
    return await asyncio.to_thread(format_source_sync, payload)


async def format_file_async(payload: FormatFileInput) -> FormatFileOutput:
    return await asyncio.to_thread(format_file_sync, payload)


async def resolve_binary_async(payload: ResolveBinaryInput) -> ResolvedBinary:
    return await asyncio.to_thread(resolve_binary_sync, payload)


operation(
    OperationSpec[FormatSourceInput, FormatSourceOutput](
        name="format.source",
        handler=format_source_async,
        sync_handler=format_source_sync,
        input_type=FormatSourceInput,
        output_type=FormatSourceOutput,
        cli_group="format",
        cli_name="source",
        mcp_name="format_source",
        description="Format Elm source text with elm-format and classify the result.",
    )
)

operation(
    OperationSpec[FormatFileInput, FormatFileOutput](
        name="format.file",
        handler=format_file_async,
        sync_handler=format_file_sync,
        input_type=FormatFileInput,
        output_type=FormatFileOutput,
        cli_group="format",
        cli_name="file",
        mcp_name="format_file",
        description="Format one .elm file, optionally writing the result in place.",
    )
)

operation(
    OperationSpec[ResolveBinaryInput, ResolvedBinary](
        name="binary.resolve",
        handler=resolve_binary_async,
        sync_handler=resolve_binary_sync,
        input_type=ResolveBinaryInput,
        output_type=ResolvedBinary,
        cli_group="binary",
        cli_name="resolve",
        mcp_name="binary_resolve",
        description="Show which elm-format binary and flags would be used.",
    )
)
