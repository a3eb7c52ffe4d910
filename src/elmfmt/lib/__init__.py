"""Core elmfmt library exports."""

from elmfmt.lib.domain import (
    BinaryUnavailable,
    FormatFailure,
    Formatted,
    FormatOutcome,
    FormatRequest,
    FormatSyntaxError,
    InvocationFailure,
    JumpAction,
    ResolvedBinary,
    UnexpectedExit,
)

__all__ = [
    "BinaryUnavailable",
    "FormatFailure",
    "FormatOutcome",
    "FormatRequest",
    "FormatSyntaxError",
    "Formatted",
    "InvocationFailure",
    "JumpAction",
    "ResolvedBinary",
    "UnexpectedExit",
]
