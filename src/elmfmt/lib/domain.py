"""Core frozen domain dataclasses for one format request/response cycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutcomeKind = Literal[
    "formatted",
    "syntax_error",
    "binary_unavailable",
    "unexpected_exit",
    "invocation_failure",
]


@dataclass(frozen=True, slots=True)
class FormatRequest:
    """Inputs for one formatter invocation."""

    source_text: str
    binary_path: str
    extra_args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ResolvedBinary:
    """Formatter executable plus the arguments resolved from config."""

    path: str
    args: tuple[str, ...] = ()
    local: bool = False

    def format_text(self) -> str:
        origin = "local" if self.local else "configured"
        command = " ".join((self.path, "--stdin", *self.args))
        return f"binary: {self.path} ({origin})\ncommand: {command}"


@dataclass(frozen=True, slots=True)
class JumpAction:
    """Host action descriptor: move the cursor to a syntax error."""

    line_number: int
    label: str = "Jump to Syntax Error"


@dataclass(frozen=True, slots=True)
class Formatted:
    new_text: str
    kind: Literal["formatted"] = field(default="formatted", init=False)

    @property
    def ok(self) -> bool:
        return True

    def format_text(self) -> str:
        return self.new_text


@dataclass(frozen=True, slots=True)
class FormatSyntaxError:
    """The formatter could not parse the source (exit status 1)."""

    raw_message: str
    line_number: int | None = None
    kind: Literal["syntax_error"] = field(default="syntax_error", init=False)

    @property
    def ok(self) -> bool:
        return False

    @property
    def jump(self) -> JumpAction | None:
        if self.line_number is None:
            return None
        return JumpAction(line_number=self.line_number)

    def format_text(self) -> str:
        if self.line_number is None:
            return f"syntax error\n\n{self.raw_message}"
        return f"syntax error at line {self.line_number}\n\n{self.raw_message}"


@dataclass(frozen=True, slots=True)
class BinaryUnavailable:
    """The formatter process could not be started."""

    path: str
    executable_exists: bool
    kind: Literal["binary_unavailable"] = field(default="binary_unavailable", init=False)

    @property
    def ok(self) -> bool:
        return False

    def format_text(self) -> str:
        if self.executable_exists:
            return f"binary not executable: {self.path}"
        return f"binary not found: {self.path}"


@dataclass(frozen=True, slots=True)
class UnexpectedExit:
    exit_code: int
    kind: Literal["unexpected_exit"] = field(default="unexpected_exit", init=False)

    @property
    def ok(self) -> bool:
        return False

    def format_text(self) -> str:
        return f"elm-format exited with code {self.exit_code}"


@dataclass(frozen=True, slots=True)
class InvocationFailure:
    message: str
    kind: Literal["invocation_failure"] = field(default="invocation_failure", init=False)

    @property
    def ok(self) -> bool:
        return False

    def format_text(self) -> str:
        return f"elm-format exception: {self.message}"


type FormatFailure = FormatSyntaxError | BinaryUnavailable | UnexpectedExit | InvocationFailure
type FormatOutcome = Formatted | FormatFailure
