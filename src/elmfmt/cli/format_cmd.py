"""CLI command handlers for format.* operations."""

from __future__ import annotations

import sys
from collections.abc import Callable
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

from cyclopts import Parameter

from elmfmt.cli.output import OutputFormat
from elmfmt.lib.domain import Formatted, FormatOutcome, JumpAction
from elmfmt.lib.exec.invoke import format_source
from elmfmt.lib.host import dispatch_outcome, should_format_on_save
from elmfmt.lib.ops._runtime import build_runtime
from elmfmt.lib.ops.format import (
    EXIT_OK,
    EXIT_WOULD_REFORMAT,
    FormatFileInput,
    FormatFileOutput,
    exit_code_for,
    format_file_sync,
)
from elmfmt.lib.ops.registry import get_all_operations, get_operation

if TYPE_CHECKING:
    from cyclopts import App

Emitter = Callable[[Any], None]
FormatGetter = Callable[[], OutputFormat]

STDIN_PATH = "-"


class TerminalHost:
    """Host callbacks for a terminal: text on stdout, notifications on stderr."""

    def __init__(self, location: str | None, *, echo: bool) -> None:
        self._location = location or "<stdin>"
        self._echo = echo

    def replace_text(self, new_text: str) -> None:
        if self._echo:
            # Written as bytes so CRLF in the buffer reaches the editor unchanged.
            sys.stdout.flush()
            sys.stdout.buffer.write(new_text.encode("utf-8"))
            sys.stdout.buffer.flush()

    def goto_line(self, line_number: int) -> None:
        print(f"{self._location}:{line_number}", file=sys.stderr)

    def notify_success(self, message: str) -> None:
        print(message, file=sys.stderr)

    def notify_info(self, message: str, *, detail: str | None = None) -> None:
        print(message if detail is None else f"{message}: {detail}", file=sys.stderr)

    def notify_error(
        self,
        message: str,
        *,
        detail: str | None = None,
        jump: JumpAction | None = None,
    ) -> None:
        print(f"error: {message}", file=sys.stderr)
        if detail is not None:
            print(detail, file=sys.stderr)
        if jump is not None:
            print(f"  --> {self._location}:{jump.line_number}", file=sys.stderr)


def _finish(outcome: FormatOutcome) -> None:
    exit_code = exit_code_for(outcome)
    if exit_code != EXIT_OK:
        raise SystemExit(exit_code)


def _format_stdin(
    emit: Emitter,
    output_format: OutputFormat,
    *,
    stdin_filename: str | None,
    on_save: bool,
) -> None:
    # Bytes in, bytes out: text-mode stdin would fold CRLF into LF.
    source = sys.stdin.buffer.read().decode("utf-8")
    runtime = build_runtime(file_path=stdin_filename)
    host = TerminalHost(stdin_filename, echo=output_format != "json")

    if on_save and not should_format_on_save(stdin_filename, runtime.config):
        # Not an Elm buffer or format-on-save is off: hand the text back untouched.
        if output_format == "json":
            emit({"skipped": True, "file_path": stdin_filename})
        else:
            host.replace_text(source)
        return

    file_path = Path(stdin_filename) if stdin_filename else None
    outcome = format_source(source, runtime.config, file_path=file_path)
    if output_format == "json":
        emit(outcome)
    else:
        dispatch_outcome(outcome, runtime.config, host)
    _finish(outcome)


def _format(
    emit: Emitter,
    get_format: FormatGetter,
    path: Annotated[
        str | None,
        Parameter(help="Elm file to format; omit (or pass '-') to read source from stdin."),
    ] = None,
    write: Annotated[
        bool,
        Parameter(name=["--write", "-w"], help="Rewrite the file in place."),
    ] = False,
    stdin_filename: Annotated[
        str | None,
        Parameter(
            name="--stdin-filename",
            help="Path of the buffer piped on stdin; used for config and local binary lookup.",
        ),
    ] = None,
    on_save: Annotated[
        bool,
        Parameter(
            name="--on-save",
            help="Apply format-on-save rules: skip non-Elm buffers or when disabled.",
        ),
    ] = False,
) -> None:
    """Format Elm source with elm-format."""

    output_format = get_format()
    if path is None or path == STDIN_PATH:
        _format_stdin(emit, output_format, stdin_filename=stdin_filename, on_save=on_save)
        return

    runtime = build_runtime(file_path=path)
    if on_save and not should_format_on_save(path, runtime.config):
        return

    result = format_file_sync(FormatFileInput(path=path, write=write))
    if output_format == "json" or write:
        host = TerminalHost(result.path, echo=False)
        if output_format == "json":
            emit(result)
        else:
            dispatch_outcome(result.outcome, runtime.config, host)
            if isinstance(result.outcome, Formatted):
                emit(result)
        _finish(result.outcome)
        return

    dispatch_outcome(result.outcome, runtime.config, TerminalHost(result.path, echo=True))
    _finish(result.outcome)


def _check(
    emit: Emitter,
    paths: Annotated[
        tuple[str, ...],
        Parameter(help="Elm files to check.", negative_iterable=()),
    ],
) -> None:
    """Report files that elm-format would change, without writing them."""

    results: list[FormatFileOutput] = [
        format_file_sync(FormatFileInput(path=path, check=True)) for path in paths
    ]
    for item in results:
        emit(item)

    failures = [exit_code_for(item.outcome) for item in results if item.outcome.kind != "formatted"]
    if failures:
        raise SystemExit(max(failures))
    if any(item.changed for item in results):
        raise SystemExit(EXIT_WOULD_REFORMAT)


def register_format_commands(
    app: App,
    emit: Emitter,
    get_format: FormatGetter,
) -> tuple[set[str], dict[str, str]]:
    handlers: dict[str, tuple[str, Callable[[], Callable[..., None]]]] = {
        "format.file": ("format", lambda: partial(_format, emit, get_format)),
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

    # `format` without a path reads source on stdin, which is the format.source operation.
    registered.add("format.source")
    descriptions["format.source"] = get_operation("format.source").description

    check_handler = partial(_check, emit)
    check_handler.__name__ = "cmd_check"
    app.command(check_handler, name="check", help=_check.__doc__)
    registered.add("format.check")
    descriptions["format.check"] = "Report files that elm-format would change."
    return registered, descriptions
