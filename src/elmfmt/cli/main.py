"""Cyclopts CLI entry point for elmfmt."""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cyclopts import App

from elmfmt import __version__
from elmfmt.cli.config_cmd import register_config_commands
from elmfmt.cli.doctor_cmd import register_doctor_commands
from elmfmt.cli.format_cmd import register_format_commands
from elmfmt.cli.output import OutputConfig, OutputFormat, normalize_output_format
from elmfmt.cli.output import emit as emit_output

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Top-level options that apply to all commands."""

    output: OutputConfig
    verbosity: int = 0


_GLOBAL_OPTIONS: ContextVar[GlobalOptions | None] = ContextVar("_GLOBAL_OPTIONS", default=None)


def get_global_options() -> GlobalOptions:
    default = GlobalOptions(output=OutputConfig(format="text"))
    return _GLOBAL_OPTIONS.get() or default


def get_output_format() -> OutputFormat:
    return get_global_options().output.format


def emit(payload: object) -> None:
    """Write command output using current output format settings."""

    emit_output(payload, get_global_options().output)


def _extract_global_options(argv: Sequence[str]) -> tuple[list[str], GlobalOptions]:
    json_mode = False
    output_format: str | None = None
    verbosity = 0
    cleaned: list[str] = []

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            cleaned.extend(argv[i:])
            break
        if arg == "--json":
            json_mode = True
            i += 1
            continue
        if arg == "--format":
            if i + 1 >= len(argv):
                raise SystemExit("--format requires a value")
            output_format = argv[i + 1]
            i += 2
            continue
        if arg.startswith("--format="):
            output_format = arg.partition("=")[2]
            i += 1
            continue
        if arg in {"-v", "--verbose"}:
            verbosity += 1
            i += 1
            continue
        if arg == "-vv":
            verbosity += 2
            i += 1
            continue

        cleaned.append(arg)
        i += 1

    resolved = normalize_output_format(requested=output_format, json_mode=json_mode)
    return cleaned, GlobalOptions(output=OutputConfig(format=resolved), verbosity=verbosity)


app = App(
    name="elmfmt",
    help="Run elm-format on Elm sources and report results editor-style.",
    version=__version__,
)
config_app = App(name="config", help="Project config commands")
app.command(config_app, name="config")


@app.command(name="serve")
def serve() -> None:
    """Start the FastMCP server on stdio."""

    from elmfmt.server.main import run_server

    run_server()


_REGISTERED_CLI_COMMANDS: set[str] = set()


def _register_commands() -> None:
    modules = (
        register_format_commands(app, emit, get_output_format),
        register_doctor_commands(app, emit),
        register_config_commands(config_app, emit),
    )
    for commands, _descriptions in modules:
        _REGISTERED_CLI_COMMANDS.update(commands)


def get_registered_cli_commands() -> set[str]:
    """Expose CLI operation names for parity tests."""

    return set(_REGISTERED_CLI_COMMANDS)


def _operation_error_message(exc: Exception) -> str:
    message = str(exc).strip()
    if message:
        return message
    return exc.__class__.__name__


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point used by `elmfmt` and `python -m elmfmt`."""

    from elmfmt.lib.logging import configure_logging

    args = list(sys.argv[1:] if argv is None else argv)
    cleaned_args, options = _extract_global_options(args)
    configure_logging(json_mode=options.output.format == "json", verbosity=options.verbosity)

    token = _GLOBAL_OPTIONS.set(options)
    try:
        try:
            app(cleaned_args)
        except (ValueError, FileNotFoundError, OSError) as exc:
            logger.debug("command failed", exc_info=True)
            print(f"error: {_operation_error_message(exc)}", file=sys.stderr)
            raise SystemExit(1) from None
    finally:
        _GLOBAL_OPTIONS.reset(token)


_register_commands()
