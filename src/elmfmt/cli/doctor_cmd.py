"""CLI command handlers for doctor and binary resolution."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Annotated, Any

from cyclopts import Parameter

from elmfmt.lib.ops.diag import DoctorInput, doctor_sync
from elmfmt.lib.ops.format import ResolveBinaryInput, resolve_binary_sync
from elmfmt.lib.ops.registry import get_all_operations

if TYPE_CHECKING:
    from cyclopts import App

Emitter = Callable[[Any], None]


def _doctor(
    emit: Emitter,
    file_path: Annotated[
        str | None,
        Parameter(name="--file", help="Elm file whose project should be checked."),
    ] = None,
) -> None:
    result = doctor_sync(DoctorInput(file_path=file_path))
    emit(result)
    if not result.ok:
        raise SystemExit(1)


def _resolve(
    emit: Emitter,
    file_path: Annotated[
        str | None,
        Parameter(help="Elm file to resolve the formatter for (default: cwd)."),
    ] = None,
) -> None:
    emit(resolve_binary_sync(ResolveBinaryInput(file_path=file_path)))


def register_doctor_commands(app: App, emit: Emitter) -> tuple[set[str], dict[str, str]]:
    handlers: dict[str, tuple[str, Callable[[], Callable[..., None]]]] = {
        "doctor": ("doctor", lambda: partial(_doctor, emit)),
        "binary.resolve": ("resolve", lambda: partial(_resolve, emit)),
    }

    registered: set[str] = set()
    descriptions: dict[str, str] = {}

    for op in get_all_operations():
        entry = handlers.get(op.name)
        if entry is None:
            continue
        command_name, handler_factory = entry
        handler = handler_factory()
        handler.__name__ = f"cmd_{command_name}"
        app.command(handler, name=command_name, help=op.description)
        registered.add(op.name)
        descriptions[op.name] = op.description

    return registered, descriptions
