"""Formatter invocation primitives."""

from elmfmt.lib.exec.binary import (
    ELM_VERSION_FLAG,
    DependencyDirResolver,
    LocalBinaryResolver,
    resolve_binary,
)
from elmfmt.lib.exec.diagnostics import (
    clean_error_text,
    discard_preamble,
    extract_line_number,
    strip_ansi,
)
from elmfmt.lib.exec.invoke import build_command, classify_exit, format_source, invoke

__all__ = [
    "ELM_VERSION_FLAG",
    "DependencyDirResolver",
    "LocalBinaryResolver",
    "build_command",
    "classify_exit",
    "clean_error_text",
    "discard_preamble",
    "extract_line_number",
    "format_source",
    "invoke",
    "resolve_binary",
    "strip_ansi",
]
