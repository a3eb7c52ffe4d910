"""Synchronous elm-format invocation and exit-status classification."""

from __future__ import annotations

import errno
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from elmfmt.lib.domain import (
    BinaryUnavailable,
    Formatted,
    FormatOutcome,
    FormatRequest,
    FormatSyntaxError,
    InvocationFailure,
    UnexpectedExit,
)
from elmfmt.lib.exec.binary import resolve_binary
from elmfmt.lib.exec.diagnostics import clean_error_text, extract_line_number

if TYPE_CHECKING:
    from elmfmt.lib.config.settings import ElmFormatConfig
    from elmfmt.lib.exec.binary import LocalBinaryResolver

logger = structlog.get_logger(__name__)

STDIN_FLAG = "--stdin"
SYNTAX_ERROR_EXIT_CODE = 1

# errno values meaning the process never started because of the executable
# itself, as opposed to resource exhaustion or bad arguments.
_UNAVAILABLE_ERRNOS = frozenset({errno.ENOENT, errno.EACCES, errno.ENOTDIR, errno.ENOEXEC})


def build_command(request: FormatRequest) -> list[str]:
    return [request.binary_path, STDIN_FLAG, *request.extra_args]


def _operation_error_message(exc: Exception) -> str:
    message = str(exc).strip()
    if message:
        return message
    return exc.__class__.__name__


def classify_exit(
    *,
    binary_path: str,
    returncode: int | None,
    stdout: str,
    stderr: str,
) -> FormatOutcome:
    """Map one finished (or never started) formatter process to an outcome."""

    if returncode is None:
        return BinaryUnavailable(path=binary_path, executable_exists=Path(binary_path).exists())
    if returncode == 0:
        return Formatted(new_text=stdout)
    if returncode == SYNTAX_ERROR_EXIT_CODE:
        cleaned = clean_error_text(stderr)
        return FormatSyntaxError(raw_message=cleaned, line_number=extract_line_number(cleaned))
    return UnexpectedExit(exit_code=returncode)


def invoke(request: FormatRequest) -> FormatOutcome:
    """Run the formatter once, blocking until it exits. No timeout, no retry."""

    command = build_command(request)
    logger.debug("Invoking formatter.", command=command)
    try:
        try:
            completed = subprocess.run(
                command,
                input=request.source_text.encode("utf-8"),
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            if exc.errno not in _UNAVAILABLE_ERRNOS:
                raise
            logger.info("Formatter binary could not be started.", binary=request.binary_path)
            return classify_exit(
                binary_path=request.binary_path,
                returncode=None,
                stdout="",
                stderr="",
            )

        # Bytes in, bytes out: text mode would translate newlines in stdout.
        outcome = classify_exit(
            binary_path=request.binary_path,
            returncode=completed.returncode,
            stdout=completed.stdout.decode("utf-8"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
        )
    except Exception as exc:
        logger.warning("Formatter invocation failed.", binary=request.binary_path, exc_info=True)
        return InvocationFailure(message=_operation_error_message(exc))

    logger.info("Formatter finished.", exit_code=completed.returncode, kind=outcome.kind)
    return outcome


def format_source(
    source_text: str,
    config: ElmFormatConfig,
    *,
    file_path: Path | None = None,
    resolver: LocalBinaryResolver | None = None,
) -> FormatOutcome:
    """Resolve the binary for `file_path` and format `source_text` with it."""

    resolved = resolve_binary(config, file_path=file_path, resolver=resolver)
    return invoke(
        FormatRequest(
            source_text=source_text,
            binary_path=resolved.path,
            extra_args=resolved.args,
        )
    )
